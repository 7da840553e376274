from __future__ import annotations

from groupsort.domain.models import Group, Person, Scheme


def make_person(pid: str, connections=(), prefs=()) -> Person:
    return Person(
        id=pid,
        first_name=f"First{pid}",
        last_name=f"Last{pid}",
        connections=list(connections),
        group_preferences=list(prefs),
    )


def make_scheme(people, groups, use_group_preferences: bool = False, title: str = "test") -> Scheme:
    return Scheme(title=title, people=list(people), groups=list(groups), use_group_preferences=use_group_preferences)


def member_ids(group: Group) -> list:
    return [m.id if m is not None else None for m in group.members]
