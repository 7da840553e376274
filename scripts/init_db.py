# scripts/init_db.py
"""
Script to initialize database tables. Run from project root:
    python scripts/init_db.py
"""
import logging

from groupsort.infrastructure import models  # noqa: F401
from groupsort.infrastructure.db.session import Base, engine

logger = logging.getLogger(__name__)


def init():
    Base.metadata.create_all(bind=engine)
    logger.info(f"DB initialized at {engine.url}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init()
