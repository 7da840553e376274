# groupsort/api/routers/schemes.py
"""
Scheme endpoints: seed people/groups/connections/preferences, run automatic
assignment, move single people, inspect statistics, import/export snapshots
and save/load named schemes in the database.
"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from groupsort.config.settings import settings
from groupsort.domain.errors import (
    DataQualityError, GroupFullError, MalformedSnapshotError, NotFoundError, SchemeError, SchemeExistsError,
    UnknownStrategyError,
)
from groupsort.domain.models import Group, Person
from groupsort.domain.validation import ValidationReport
from groupsort.infrastructure.db.session import get_db
from groupsort.infrastructure.repositories.scheme_repo import SchemeRepo
from groupsort.services.scheme_service import SchemeService, workspaces

router = APIRouter()


class SchemeCreateReq(BaseModel):
    title: str
    use_group_preferences: Optional[bool] = None
    rank_threshold: Optional[int] = None


class PersonIn(BaseModel):
    id: str
    first_name: str
    last_name: str
    connections: List[str] = Field(default_factory=list)
    group_preferences: List[str] = Field(default_factory=list)
    x: float = 0
    y: float = 0


class GroupIn(BaseModel):
    title: str
    max_size: int = Field(le=settings.MAX_GROUP_SIZE)
    id: Optional[str] = None
    x: float = 0
    y: float = 0


class ConnectionsReq(BaseModel):
    rows: List[List[str]]


class PreferencesReq(BaseModel):
    lines: List[str]


class AutoassignReq(BaseModel):
    algorithm: str = "balanced"
    seed: Optional[int] = None


class ReassignReq(BaseModel):
    person_id: str
    group_id: Optional[str] = None
    slot: Optional[int] = None


class RenameReq(BaseModel):
    title: str


class OptionsReq(BaseModel):
    use_group_preferences: Optional[bool] = None
    rank_threshold: Optional[int] = None


class SaveReq(BaseModel):
    name: Optional[str] = None


def _fail(e: SchemeError):
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e
    if isinstance(e, DataQualityError):
        detail = {"message": "Data quality check failed", "errors": e.report.errors, "warnings": e.report.warnings}
        raise HTTPException(status_code=409, detail=detail) from e
    if isinstance(e, (GroupFullError, SchemeExistsError)):
        raise HTTPException(status_code=409, detail=str(e)) from e
    if isinstance(e, (MalformedSnapshotError, UnknownStrategyError)):
        raise HTTPException(status_code=422, detail=str(e)) from e
    raise HTTPException(status_code=400, detail=str(e)) from e


def _service(title: str) -> SchemeService:
    try:
        return workspaces.get(title)
    except NotFoundError as e:
        _fail(e)


def _result(service: SchemeService, report: ValidationReport) -> dict:
    return {"errors": report.errors, "warnings": report.warnings, "statistics": service.statistics()}


@router.get("/", summary="List in-memory schemes")
def list_schemes():
    return {"schemes": workspaces.names()}


@router.post("/", summary="Create an empty scheme")
def create_scheme(req: SchemeCreateReq):
    try:
        service = workspaces.create(req.title)
    except SchemeError as e:
        _fail(e)
    if req.use_group_preferences is not None:
        service.set_use_group_preferences(req.use_group_preferences)
    if req.rank_threshold is not None:
        service.set_rank_threshold(req.rank_threshold)
    return service.export_snapshot()


@router.get("/saved", summary="List schemes saved in the database")
def list_saved(db: Session = Depends(get_db)):
    return {"saved": SchemeRepo(db).list_names()}


@router.get("/{title}", summary="Export the scheme as a snapshot document")
def get_scheme(title: str):
    return _service(title).export_snapshot()


@router.put("/{title}/people", summary="Replace all people")
def set_people(title: str, people: List[PersonIn]):
    service = _service(title)
    try:
        report = service.set_people([Person(**p.model_dump()) for p in people])
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.put("/{title}/groups", summary="Replace all groups")
def set_groups(title: str, groups: List[GroupIn]):
    service = _service(title)
    try:
        report = service.set_groups([Group(**g.model_dump()) for g in groups])
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.put("/{title}/connections", summary="Set connections from rows of [person, connected...]")
def set_connections(title: str, req: ConnectionsReq):
    service = _service(title)
    try:
        report = service.set_connections(req.rows)
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.put("/{title}/preferences", summary="Set group preferences from 'person, title, title...' lines")
def set_preferences(title: str, req: PreferencesReq):
    service = _service(title)
    try:
        report = service.set_group_preferences(req.lines)
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.post("/{title}/autoassign", summary="Place unassigned people (random, sequential, balanced)")
def autoassign(title: str, req: AutoassignReq):
    service = _service(title)
    try:
        report = service.autoassign(req.algorithm, seed=req.seed)
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.post("/{title}/reassign", summary="Move one person to a group, or unassign with group_id null")
def reassign(title: str, req: ReassignReq):
    service = _service(title)
    try:
        report = service.reassign(req.person_id, req.group_id, req.slot)
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.patch("/{title}/groups/{group_id}", summary="Rename a group")
def rename_group(title: str, group_id: str, req: RenameReq):
    service = _service(title)
    try:
        report = service.rename_group(group_id, req.title)
    except SchemeError as e:
        _fail(e)
    return _result(service, report)


@router.get("/{title}/groups/{group_id}/highlighted", summary="People ranking this group within the threshold")
def highlighted(title: str, group_id: str):
    try:
        return _service(title).highlighted(group_id)
    except SchemeError as e:
        _fail(e)


@router.patch("/{title}/options", summary="Toggle group preferences / set rank threshold")
def set_options(title: str, req: OptionsReq):
    service = _service(title)
    if req.use_group_preferences is not None:
        service.set_use_group_preferences(req.use_group_preferences)
    if req.rank_threshold is not None:
        service.set_rank_threshold(req.rank_threshold)
    return service.options()


@router.get("/{title}/statistics", summary="Unassigned and unhappy counts")
def statistics(title: str):
    return _service(title).statistics()


@router.post("/{title}/import", summary="Replace the scheme with a snapshot document")
def import_snapshot(title: str, document: dict = Body(...)):
    try:
        service = workspaces.import_snapshot(title, document)
    except SchemeError as e:
        _fail(e)
    return {"statistics": service.statistics()}


@router.post("/{title}/save", summary="Save the scheme to the database")
def save_scheme(title: str, req: SaveReq, db: Session = Depends(get_db)):
    service = _service(title)
    row = service.save(SchemeRepo(db), req.name or title)
    return {"name": row.name, "version": row.version}


@router.post("/{title}/load/{name}", summary="Load a saved scheme into this workspace")
def load_scheme(title: str, name: str, db: Session = Depends(get_db)):
    try:
        service = workspaces.load(title, SchemeRepo(db), name)
    except SchemeError as e:
        _fail(e)
    return {"statistics": service.statistics()}
