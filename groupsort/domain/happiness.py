# groupsort/domain/happiness.py
"""
Happiness of a person in their current group.

    0   unassigned, or alone in the group
    -1  assigned next to peers, none of them a connection
    n   number of connections sitting in the same group
"""
from typing import Optional

from groupsort.domain.models import Group, Person, Scheme


def compute_happiness(person: Person, group: Optional[Group]) -> int:
    """
    >>> a, b = Person("a", "A", "A", connections=["b"]), Person("b", "B", "B")
    >>> g = Group("G", 3, members=[a, b, None])
    >>> compute_happiness(a, g), compute_happiness(b, g)
    (1, -1)
    """
    if group is None:
        return 0
    connected = sum(1 for m in group.members if m is not None and m.id in person.connections)
    if connected == 0:
        has_peers = any(m is not None and m is not person for m in group.members)
        return -1 if has_peers else 0
    return connected


def update_person_happiness(scheme: Scheme, person: Person) -> int:
    person.happiness = compute_happiness(person, scheme.group_of(person))
    return person.happiness


def update_all_happiness(scheme: Scheme):
    """Full recompute; unassigned people drop back to 0."""
    for person in scheme.people:
        person.happiness = 0
    for group in scheme.groups:
        for person in group.members:
            if person is not None:
                person.happiness = compute_happiness(person, group)
