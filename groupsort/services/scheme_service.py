# groupsort/services/scheme_service.py
"""
Transactional mutations on a single Scheme.

Every mutation runs under the service lock, against a backup copy of the
scheme. Happiness is recomputed and the validator enforced before the
mutation returns; if enforcement fails the backup is restored and the
DataQualityError propagates, so a rejected mutation leaves no trace.
"""
import copy
import logging
import random
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Sequence, Union

from groupsort.domain import assignment, bulk, snapshot
from groupsort.domain.errors import GroupFullError, NotFoundError, SchemeExistsError
from groupsort.domain.happiness import update_all_happiness
from groupsort.domain.models import Group, Person, Scheme
from groupsort.domain.validation import ValidationReport, enforce
from groupsort.infrastructure.repositories.scheme_repo import SchemeRepo

logger = logging.getLogger(__name__)


class SchemeService:
    def __init__(self, scheme: Scheme = None):
        self.scheme = scheme or Scheme()
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self, action: str):
        with self._lock:
            backup = copy.deepcopy(self.scheme)
            try:
                yield self.scheme
            except Exception:
                logger.error(f"{action} rejected for scheme '{backup.title}', rolling back")
                self.scheme = backup
                raise
            logger.info(f"{action} applied to scheme '{self.scheme.title}'")

    def _settle(self) -> ValidationReport:
        update_all_happiness(self.scheme)
        return enforce(self.scheme)

    # ----------------------------
    # Bulk setters
    # ----------------------------
    def set_people(self, people: List[Person]) -> ValidationReport:
        with self.transaction("set_people") as scheme:
            scheme.people = list(people)
            return self._settle()

    def set_groups(self, groups: List[Group]) -> ValidationReport:
        with self.transaction("set_groups") as scheme:
            scheme.groups = list(groups)
            return self._settle()

    def set_connections(self, rows: Union[str, Iterable[Sequence[str]]]) -> ValidationReport:
        with self.transaction("set_connections") as scheme:
            skipped = bulk.set_connections(scheme, rows)
            report = self._settle()
            report.warnings[:0] = skipped
            return report

    def set_group_preferences(self, lines: Union[str, Iterable[str]]) -> ValidationReport:
        with self.transaction("set_group_preferences") as scheme:
            skipped = bulk.set_group_preferences(scheme, lines)
            report = self._settle()
            report.warnings[:0] = skipped
            return report

    # ----------------------------
    # Placement
    # ----------------------------
    def autoassign(self, strategy: str, seed: Optional[int] = None) -> ValidationReport:
        rng = random.Random(seed) if seed is not None else None
        with self.transaction(f"autoassign({strategy})") as scheme:
            return assignment.autoassign(scheme, strategy, rng)

    def reassign(self, person_id: str, group_id: Optional[str] = None, slot: Optional[int] = None) -> ValidationReport:
        """
        Move a person to `group_id` (preferring `slot` when it is free), or
        unassign them when group_id is None.
        """
        with self.transaction("reassign") as scheme:
            person = scheme.get_person_by_id(person_id)
            if person is None:
                raise NotFoundError(f"Person not found: {person_id}")
            target = None
            if group_id is not None:
                target = scheme.get_group(group_id)
                if target is None:
                    raise NotFoundError(f"Group not found: {group_id}")

            for group in scheme.groups:
                group.remove_member(person)

            if target is not None:
                if not target.has_available_slot():
                    raise GroupFullError(f"Group {target.title} is full")
                target.add_member(person, slot)
            return self._settle()

    # ----------------------------
    # Options
    # ----------------------------
    def rename_group(self, group_id: str, title: str) -> ValidationReport:
        with self.transaction("rename_group") as scheme:
            group = scheme.get_group(group_id)
            if group is None:
                raise NotFoundError(f"Group not found: {group_id}")
            group.title = title
            return self._settle()

    def set_use_group_preferences(self, enabled: bool):
        with self._lock:
            self.scheme.use_group_preferences = bool(enabled)

    def set_rank_threshold(self, threshold: int):
        with self._lock:
            self.scheme.rank_threshold = threshold

    def options(self) -> dict:
        with self._lock:
            return {
                "use_group_preferences": self.scheme.use_group_preferences,
                "rank_threshold": self.scheme.rank_threshold,
            }

    def statistics(self) -> dict:
        with self._lock:
            return self.scheme.statistics()

    def highlighted(self, group_id: str) -> dict:
        """People ranking the group within the rank threshold, with their rank."""
        with self._lock:
            group = self.scheme.get_group(group_id)
            if group is None:
                raise NotFoundError(f"Group not found: {group_id}")
            return {
                "group_id": group.id,
                "rank_threshold": self.scheme.rank_threshold,
                "people": [
                    {"id": p.id, "rank": assignment.preference_rank(p, group)}
                    for p in assignment.highlighted_people(self.scheme, group)
                ],
            }

    # ----------------------------
    # Snapshots and persistence
    # ----------------------------
    def export_snapshot(self) -> dict:
        with self._lock:
            return snapshot.to_document(self.scheme)

    def import_snapshot(self, data: Union[str, bytes, dict]) -> Scheme:
        """Replace the scheme with a decoded snapshot; the current one survives a failed decode."""
        scheme = snapshot.from_document(data)
        self.replace(scheme)
        logger.info(f"Imported scheme '{scheme.title}' ({len(scheme.people)} people, {len(scheme.groups)} groups)")
        return scheme

    def replace(self, scheme: Scheme):
        with self._lock:
            self.scheme = scheme

    def save(self, repo: SchemeRepo, name: Optional[str] = None):
        name = name or self.scheme.title
        row = repo.save(name, self.export_snapshot())
        logger.info(f"Saved scheme as '{name}'")
        return row

    def load(self, repo: SchemeRepo, name: str) -> Scheme:
        return self.import_snapshot(fetch_saved(repo, name))


def fetch_saved(repo: SchemeRepo, name: str) -> dict:
    row = repo.get(name)
    if row is None:
        raise NotFoundError(f"No saved scheme named {name}")
    return row.document


class WorkspaceRegistry:
    """Named in-memory schemes, one service (and lock) each."""

    def __init__(self):
        self._services: Dict[str, SchemeService] = {}
        self._lock = threading.Lock()

    def create(self, title: str) -> SchemeService:
        with self._lock:
            if title in self._services:
                raise SchemeExistsError(f"A scheme named {title} already exists")
            service = SchemeService(Scheme(title=title))
            self._services[title] = service
            return service

    def get(self, title: str) -> SchemeService:
        service = self._services.get(title)
        if service is None:
            raise NotFoundError(f"No scheme named {title}")
        return service

    def import_snapshot(self, title: str, data: Union[str, bytes, dict]) -> SchemeService:
        """
        Decode first, register afterwards: a rejected document leaves the
        registry untouched. An existing workspace has its scheme replaced.
        """
        scheme = snapshot.from_document(data)
        with self._lock:
            service = self._services.get(title)
            if service is None:
                service = SchemeService(scheme)
                self._services[title] = service
        if service.scheme is not scheme:
            service.replace(scheme)
        logger.info(f"Imported scheme '{scheme.title}' into workspace '{title}'")
        return service

    def load(self, title: str, repo: SchemeRepo, name: str) -> SchemeService:
        return self.import_snapshot(title, fetch_saved(repo, name))

    def names(self) -> List[str]:
        return sorted(self._services)

    def clear(self):
        with self._lock:
            self._services.clear()


workspaces = WorkspaceRegistry()
