# groupsort/domain/validation.py
"""
Data quality validator for a Scheme.

validate() scans the whole aggregate and returns a ValidationReport. Errors
are structural violations that must block the mutation that caused them;
warnings are anomalies that were corrected in place (invalid connections) or
are merely reported (stale happiness cache).

enforce() logs the report and raises DataQualityError when it has errors.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from groupsort.domain.errors import DataQualityError
from groupsort.domain.happiness import compute_happiness, update_person_happiness
from groupsort.domain.models import Scheme

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate(scheme: Scheme) -> ValidationReport:
    report = ValidationReport()
    errors, warnings = report.errors, report.warnings

    # unique person ids
    person_ids = set()
    for person in scheme.people:
        if person.id in person_ids:
            errors.append(f"Duplicate person ID: {person.id}")
        person_ids.add(person.id)

    # unique group titles and ids
    titles, group_ids = set(), set()
    for group in scheme.groups:
        duplicate_title = group.title in titles
        if duplicate_title:
            errors.append(f"Duplicate group title: {group.title}")
        titles.add(group.title)
        if group.id in group_ids and not duplicate_title:
            errors.append(f"Duplicate group ID: {group.id}")
        group_ids.add(group.id)

    # required fields and types
    for person in scheme.people:
        if not person.id or not person.first_name or not person.last_name:
            errors.append(f"Missing required field for person: {person.id}")
        if not isinstance(person.id, str):
            errors.append(f"Invalid ID type for person: {person.id}")

    for group in scheme.groups:
        if not group.title or not group.max_size:
            errors.append(f"Missing required field for group: {group.title}")
        if not _is_positive_int(group.max_size):
            errors.append(f"Invalid maxSize for group: {group.title}, {group.max_size}")

    # prune connections that point nowhere or back at the person
    for person in scheme.people:
        valid = []
        for conn_id in person.connections:
            if conn_id not in person_ids:
                warnings.append(f"Removed invalid connection ID {conn_id} for person {person.id}")
            elif conn_id == person.id:
                warnings.append(f"Removed self-connection for person {person.id}")
            else:
                valid.append(conn_id)
        if len(valid) != len(person.connections):
            person.connections = valid
            update_person_happiness(scheme, person)

    # group occupancy
    known = {id(p) for p in scheme.people}
    seen: Dict[int, str] = {}
    for group in scheme.groups:
        if _is_positive_int(group.max_size) and group.occupied_count() > group.max_size:
            errors.append(f"Group {group.title} exceeds maxSize")
        for member in group.occupants():
            if id(member) not in known:
                errors.append(f"Invalid member in group {group.title}: {member.id}")
            other = seen.get(id(member))
            if other is not None:
                errors.append(f"Person {member.id} occupies more than one slot ({other}, {group.title})")
            seen[id(member)] = group.title

    # happiness cache
    for person in scheme.people:
        expected = compute_happiness(person, scheme.group_of(person))
        if person.happiness != expected:
            warnings.append(
                f"Happiness conflict for person {person.id}: found {person.happiness}, expected {expected}."
            )

    # two occupants claiming one slot
    for group in scheme.groups:
        positions = set()
        for member in group.occupants():
            if member.slot in positions:
                errors.append(f"Multiple people occupy the same position in group {group.title} at slot {member.slot}")
            positions.add(member.slot)

    return report


def enforce(scheme: Scheme) -> ValidationReport:
    report = validate(scheme)

    if report.warnings:
        logger.warning(f"Data quality warnings for scheme '{scheme.title}'")
        for warning in report.warnings:
            logger.warning(warning)

    if report.errors:
        logger.error(f"Data quality issues detected for scheme '{scheme.title}'")
        for error in report.errors:
            logger.error(error)
        raise DataQualityError(report)

    return report
