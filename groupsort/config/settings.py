# groupsort/config/settings.py

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./groupsort.db"
    LOG_LEVEL: str = "INFO"

    # snapshot documents are written with this version string
    SNAPSHOT_VERSION: str = "2.5.1"

    # balanced assignment without preferences: a group may hold at most
    # (smallest group) + BALANCE_SLACK - 1 people before it stops being eligible
    BALANCE_SLACK: int = 5
    RANK_THRESHOLD_DEFAULT: int = 2
    # slot arrays are allocated up front, so group sizes are capped
    MAX_GROUP_SIZE: int = 1000
    USE_GROUP_PREFERENCES_DEFAULT: bool = True
    RANDOM_SEED: Optional[int] = None

    class Config:
        env_file = ".env"

settings = Settings()
