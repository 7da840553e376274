# groupsort/domain/snapshot.py
"""
Snapshot codec: Scheme <-> JSON document.

Document layout (camelCase keys, compatible with exported 2.5.1 files):

    {
      "version": "2.5.1",
      "title": "...",
      "people": [{"id", "firstName", "lastName", "connections",
                  "groupPreferences", "happiness", "x", "y"}],
      "groups": [{"id", "title", "maxSize", "x", "y", "members": [id | null]}],
      "useGroupPreferences": true,
      "rankThreshold": 2
    }

Group "id" and "rankThreshold" are optional on input. Member ids that do not
resolve to a decoded person become empty slots.
"""
import json
import logging
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from groupsort.config.settings import settings
from groupsort.domain.errors import MalformedSnapshotError
from groupsort.domain.models import Group, Person, Scheme
from groupsort.domain.validation import enforce

logger = logging.getLogger(__name__)


class PersonDTO(BaseModel):
    id: str
    firstName: str = ""
    lastName: str = ""
    connections: Optional[List[str]] = None
    groupPreferences: Optional[List[str]] = None
    happiness: int = 0
    x: Optional[float] = None
    y: Optional[float] = None


class GroupDTO(BaseModel):
    id: Optional[str] = None
    title: str
    maxSize: int = Field(le=settings.MAX_GROUP_SIZE)
    x: Optional[float] = None
    y: Optional[float] = None
    members: List[Optional[str]] = Field(default_factory=list)


class SnapshotDTO(BaseModel):
    version: str = Field(default_factory=lambda: settings.SNAPSHOT_VERSION)
    title: str = ""
    people: List[PersonDTO]
    groups: List[GroupDTO]
    useGroupPreferences: Optional[bool] = None
    rankThreshold: Optional[int] = None


def to_document(scheme: Scheme) -> dict:
    return {
        "version": scheme.version,
        "title": scheme.title,
        "people": [
            {
                "id": p.id,
                "firstName": p.first_name,
                "lastName": p.last_name,
                "connections": list(p.connections),
                "groupPreferences": list(p.group_preferences),
                "happiness": p.happiness,
                "x": p.x,
                "y": p.y,
            }
            for p in scheme.people
        ],
        "groups": [
            {
                "id": g.id,
                "title": g.title,
                "maxSize": g.max_size,
                "x": g.x,
                "y": g.y,
                "members": [m.id if m is not None else None for m in g.members],
            }
            for g in scheme.groups
        ],
        "useGroupPreferences": scheme.use_group_preferences,
        "rankThreshold": scheme.rank_threshold,
    }


def encode(scheme: Scheme) -> str:
    return json.dumps(to_document(scheme))


def _parse(data: Union[str, bytes, dict]) -> SnapshotDTO:
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedSnapshotError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedSnapshotError("Snapshot must be a JSON object")
    try:
        return SnapshotDTO.model_validate(data)
    except ValidationError as e:
        raise MalformedSnapshotError(f"Malformed snapshot: {e}") from e


def from_document(data: Union[str, bytes, dict]) -> Scheme:
    """
    Rebuild a Scheme from a snapshot. People are decoded first, then groups
    resolve their member ids against them. The result is validated; stored
    happiness values are kept as-is.
    """
    doc = _parse(data)

    scheme = Scheme(title=doc.title, version=doc.version)
    scheme.use_group_preferences = bool(doc.useGroupPreferences)
    if doc.rankThreshold is not None:
        scheme.rank_threshold = doc.rankThreshold

    for item in doc.people:
        scheme.people.append(Person(
            id=item.id,
            first_name=item.firstName,
            last_name=item.lastName,
            connections=list(item.connections or []),
            group_preferences=list(item.groupPreferences or []),
            happiness=item.happiness,
            x=item.x,
            y=item.y,
        ))

    by_id = {}
    for p in scheme.people:
        by_id.setdefault(p.id, p)

    for gd in doc.groups:
        group = Group(title=gd.title, max_size=gd.maxSize, x=gd.x, y=gd.y, id=gd.id)
        slots = max(len(gd.members), len(group.members))
        group.members = [None] * slots
        for i, member_id in enumerate(gd.members):
            if member_id is None:
                continue
            person = by_id.get(member_id)
            if person is None:
                logger.warning(f"Group {gd.title}: member {member_id} not found, slot {i} left empty")
                continue
            group.add_member(person, i)
        scheme.groups.append(group)

    enforce(scheme)
    return scheme


decode = from_document
