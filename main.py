# main.py
"""
Application entrypoint. Includes routers and mounts.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from groupsort.api.routers import admin, schemes
from groupsort.config.settings import settings
from groupsort.infrastructure import models  # noqa: F401
from groupsort.infrastructure.db.session import Base, engine

logging.basicConfig(level=settings.LOG_LEVEL)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Group Scheme Assignment Backend")

# Basic CORS (adjust origins in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routers
app.include_router(schemes.router, prefix="/api/v1/schemes", tags=["schemes"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])


@app.get("/")
async def index():
    """Health / basic info endpoint."""
    return {"status": "ok", "service": "groupsort-backend", "env": settings.ENV}
