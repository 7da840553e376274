# groupsort/domain/models.py
"""
In-memory entities: Person, Group and the Scheme aggregate.

Groups own a fixed-length slot list; a Person only caches which group id and
slot index it sits in. Equality is identity so slot lookups never confuse two
people that happen to share field values.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from groupsort.config.settings import settings
from groupsort.domain.errors import GroupFullError


@dataclass(eq=False)
class Person:
    id: str
    first_name: str
    last_name: str
    connections: List[str] = field(default_factory=list)
    group_preferences: List[str] = field(default_factory=list)
    happiness: int = 0
    x: float = 0
    y: float = 0
    # placement cache, maintained by Group.add_member / remove_member
    group_id: Optional[str] = None
    slot: Optional[int] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def set_connection_ids(self, ids: List[str]):
        self.connections = list(ids)

    def set_group_preferences(self, keys: List[str]):
        self.group_preferences = list(keys)

    def __str__(self):
        return f"{self.display_name} ({self.id})"


@dataclass(eq=False)
class Group:
    title: str
    max_size: int
    x: float = 0
    y: float = 0
    id: Optional[str] = None
    members: Optional[List[Optional[Person]]] = None

    def __post_init__(self):
        if not self.id:
            self.id = self.title
        if self.members is None:
            size = self.max_size if isinstance(self.max_size, int) and self.max_size > 0 else 0
            self.members = [None] * size

    def occupied_count(self) -> int:
        return sum(1 for m in self.members if m is not None)

    def has_available_slot(self) -> bool:
        return self.first_free_slot() is not None

    def first_free_slot(self) -> Optional[int]:
        for i, m in enumerate(self.members):
            if m is None:
                return i
        return None

    def contains(self, person: Person) -> bool:
        return any(m is person for m in self.members)

    def occupants(self) -> List[Person]:
        return [m for m in self.members if m is not None]

    def add_member(self, person: Person, slot: Optional[int] = None) -> int:
        """
        Place person in `slot` when it is free, otherwise in the first free slot.
        Returns the slot index used.
        """
        if slot is None or not (0 <= slot < len(self.members)) or self.members[slot] is not None:
            slot = self.first_free_slot()
        if slot is None:
            raise GroupFullError(f"Group {self.title} has no free slot")
        self.members[slot] = person
        person.group_id = self.id
        person.slot = slot
        return slot

    def remove_member(self, person: Person) -> bool:
        removed = False
        for i, m in enumerate(self.members):
            if m is person:
                self.members[i] = None
                removed = True
        if removed and person.group_id == self.id:
            person.group_id = None
            person.slot = None
        return removed

    def __str__(self):
        return f"{self.title} ({self.occupied_count()}/{self.max_size})"


@dataclass(eq=False)
class Scheme:
    title: str = ""
    people: List[Person] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    use_group_preferences: bool = field(default_factory=lambda: settings.USE_GROUP_PREFERENCES_DEFAULT)
    rank_threshold: int = field(default_factory=lambda: settings.RANK_THRESHOLD_DEFAULT)
    version: str = field(default_factory=lambda: settings.SNAPSHOT_VERSION)

    # ----------------------------
    # Lookups
    # ----------------------------
    def get_person_by_id(self, person_id: str) -> Optional[Person]:
        for p in self.people:
            if p.id == person_id:
                return p
        return None

    def get_group(self, group_id: str) -> Optional[Group]:
        for g in self.groups:
            if g.id == group_id:
                return g
        return None

    def get_group_by_title(self, title: str) -> Optional[Group]:
        for g in self.groups:
            if g.title == title:
                return g
        return None

    def group_of(self, person: Person) -> Optional[Group]:
        for g in self.groups:
            if g.contains(person):
                return g
        return None

    def unassigned_people(self) -> List[Person]:
        return [p for p in self.people if self.group_of(p) is None]

    # ----------------------------
    # Statistics
    # ----------------------------
    def unassigned_count(self) -> int:
        return len(self.unassigned_people())

    def unhappy_count(self) -> int:
        return sum(1 for p in self.people if p.happiness == -1)

    def people_with_connections_count(self) -> int:
        return sum(1 for p in self.people if len(p.connections) > 1)

    def statistics(self) -> dict:
        total = len(self.people)
        unassigned = self.unassigned_count()
        unhappy = self.unhappy_count()
        connected = self.people_with_connections_count()
        return {
            "total": total,
            "unassigned": unassigned,
            "unassigned_pct": round(unassigned / total * 100, 2) if total else 0,
            "unhappy": unhappy,
            "people_with_connections": connected,
            "unhappy_pct": round(unhappy / connected * 100, 2) if connected else 0,
        }
