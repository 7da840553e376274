# groupsort/domain/assignment.py
"""
Automatic placement of unassigned people into groups.

Strategies operate on the list of people that currently occupy no slot and
mutate group slots in place. Each strategy has the signature

    strategy(scheme: Scheme, people: List[Person], rng: random.Random) -> None

autoassign() picks the strategy by name, recomputes happiness and runs the
validator afterwards.
"""
import logging
import random
from typing import Callable, Dict, List, Optional

from groupsort.config.settings import settings
from groupsort.domain.errors import UnknownStrategyError
from groupsort.domain.happiness import update_all_happiness
from groupsort.domain.models import Group, Person, Scheme
from groupsort.domain.validation import ValidationReport, enforce

logger = logging.getLogger(__name__)

Strategy = Callable[[Scheme, List[Person], random.Random], None]


# ----------------------------
# Scoring
# ----------------------------
def preference_score(person: Person, group: Group) -> int:
    """
    Rank-weighted match: first of N preferences scores N, last scores 1,
    no preference at all scores 0.
    """
    prefs = person.group_preferences
    if group.id not in prefs:
        return 0
    return len(prefs) - prefs.index(group.id)


def connection_score(person: Person, group: Group) -> int:
    return sum(1 for m in group.members if m is not None and m.id in person.connections)


def preference_rank(person: Person, group: Group) -> Optional[int]:
    """1-based position of the group in the person's preferences, None if absent."""
    if group.id not in person.group_preferences:
        return None
    return person.group_preferences.index(group.id) + 1


def highlighted_people(scheme: Scheme, group: Group) -> List[Person]:
    """People ranking `group` within the scheme's rank threshold."""
    result = []
    for person in scheme.people:
        rank = preference_rank(person, group)
        if rank is not None and rank <= scheme.rank_threshold:
            result.append(person)
    return result


def can_add_to_group(scheme: Scheme, group: Group, slack: Optional[int] = None) -> bool:
    """
    A group is eligible while it has a free slot. Without preferences it must
    also stay below the smallest group's size plus `slack`.
    """
    current = group.occupied_count()
    if current >= group.max_size:
        return False
    if scheme.use_group_preferences:
        return True
    slack = settings.BALANCE_SLACK if slack is None else slack
    smallest = min(g.occupied_count() for g in scheme.groups)
    return current < smallest + slack


# ----------------------------
# Ordering helpers
# ----------------------------
def shuffle_range(items: list, start: int, end: int, rng: random.Random):
    chunk = items[start:end]
    rng.shuffle(chunk)
    items[start:end] = chunk


def randomize_equal_connections(people: List[Person], rng: random.Random):
    """Shuffle each contiguous run of people sharing a connection count."""
    start = 0
    for i in range(1, len(people) + 1):
        if i == len(people) or len(people[i].connections) != len(people[start].connections):
            shuffle_range(people, start, i, rng)
            start = i


# ----------------------------
# Strategies
# ----------------------------
def random_assignment(scheme: Scheme, people: List[Person], rng: random.Random):
    for person in people:
        available = [g for g in scheme.groups if g.has_available_slot()]
        if available:
            rng.choice(available).add_member(person)


def sequential_assignment(scheme: Scheme, people: List[Person], rng: random.Random):
    """Fill groups to capacity in declaration order, people in input order."""
    idx = 0
    groups = scheme.groups
    for person in people:
        while idx < len(groups) and not groups[idx].has_available_slot():
            idx += 1
        if idx == len(groups):
            break
        groups[idx].add_member(person)


def balanced_assignment(scheme: Scheme, people: List[Person], rng: random.Random):
    """
    Greedy placement: most-connected people first, each into the eligible
    group with the strictly highest score. Groups are visited in a fresh
    random order per person so the first maximum found wins ties.
    """
    ordered = sorted(people, key=lambda p: len(p.connections), reverse=True)
    randomize_equal_connections(ordered, rng)

    score = preference_score if scheme.use_group_preferences else connection_score

    for person in ordered:
        best_group = None
        best_score = -1

        candidates = list(scheme.groups)
        rng.shuffle(candidates)
        for group in candidates:
            if not can_add_to_group(scheme, group):
                continue
            s = score(person, group)
            if s > best_score:
                best_score = s
                best_group = group

        if best_group is not None:
            best_group.add_member(person)
        else:
            logger.debug(f"No eligible group for {person}")


STRATEGIES: Dict[str, Strategy] = {
    "random": random_assignment,
    "sequential": sequential_assignment,
    "balanced": balanced_assignment,
}


def autoassign(scheme: Scheme, strategy: str, rng: Optional[random.Random] = None) -> ValidationReport:
    """
    Place every unassigned person using the named strategy, then recompute
    happiness and enforce data quality.
    """
    algorithm = STRATEGIES.get(strategy)
    if algorithm is None:
        raise UnknownStrategyError(f"Unknown algorithm: {strategy}")

    rng = rng or random.Random(settings.RANDOM_SEED)
    unassigned = scheme.unassigned_people()
    algorithm(scheme, unassigned, rng)

    placed = sum(1 for p in unassigned if scheme.group_of(p) is not None)
    logger.info(f"autoassign({strategy}) placed {placed} of {len(unassigned)} unassigned people")

    update_all_happiness(scheme)
    return enforce(scheme)
