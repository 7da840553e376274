# groupsort/infrastructure/models.py
"""
SQLAlchemy ORM models. A saved scheme is stored as its snapshot document.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, JSON, String

from groupsort.infrastructure.db.session import Base


def now():
    return datetime.now(timezone.utc)


class SavedScheme(Base):
    __tablename__ = "saved_schemes"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    version = Column(String(32), nullable=False)
    document = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)
