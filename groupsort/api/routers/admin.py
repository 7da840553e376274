# groupsort/api/routers/admin.py
"""
Admin utilities: create or reset database tables, drop in-memory schemes.
"""
from fastapi import APIRouter

from groupsort.infrastructure import models  # noqa: F401  registers tables on Base
from groupsort.infrastructure.db.session import Base, engine
from groupsort.services.scheme_service import workspaces

router = APIRouter()


@router.post("/init_db", summary="Create all tables in DB")
def init_db():
    """
    Ensure missing tables exist. Existing tables are left untouched.
    """
    Base.metadata.create_all(bind=engine)
    return {"status": "ok", "message": "Database initialized"}


@router.post("/reset_db", summary="Drop and recreate all tables")
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return {"status": "ok", "message": "Database reset"}


@router.post("/clear_workspaces", summary="Forget every in-memory scheme")
def clear_workspaces():
    workspaces.clear()
    return {"status": "ok"}
