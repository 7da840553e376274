# groupsort/domain/bulk.py
"""
Bulk text inputs: group preferences and connections.

Both accept comma-separated lines whose first token is a person id. Lines for
unknown people are skipped and returned as messages so the caller can show
them to the operator; they never abort the import.
"""
import logging
from typing import Iterable, List, Sequence, Union

from groupsort.domain.models import Scheme

logger = logging.getLogger(__name__)


def split_line(line: str) -> List[str]:
    return [token.strip() for token in line.split(",")]


def _rows(lines: Union[str, Iterable]) -> List[List[str]]:
    """
    Split input into token rows. The first token is always the person id,
    even when blank; empty tokens are dropped from the tail only.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    rows = []
    for line in lines:
        row = split_line(line) if isinstance(line, str) else [str(t).strip() for t in line]
        if not any(row):
            continue
        rows.append([row[0]] + [t for t in row[1:] if t != ""])
    return rows


def _skip(skipped: List[str], msg: str):
    logger.warning(msg)
    skipped.append(msg)


def resolve_group_key(scheme: Scheme, token: str) -> str:
    """Titles map to the stable group id; anything else is kept verbatim."""
    group = scheme.get_group_by_title(token)
    if group is not None:
        return group.id
    return token


def set_group_preferences(scheme: Scheme, lines: Union[str, Iterable[str]]) -> List[str]:
    """
    Each line: person_id, first choice, second choice, ...
    Returns the list of skipped-line messages.
    """
    skipped = []
    for row in _rows(lines):
        person_id, titles = row[0], row[1:]
        if not scheme.people:
            _skip(skipped, "Can't set group preferences because there are no people yet!")
            continue
        if not person_id:
            _skip(skipped, f"Missing person id in group preference line: {', '.join(row)}")
            continue
        person = scheme.get_person_by_id(person_id)
        if person is None:
            _skip(skipped, f"Person not found for group preference: {person_id}")
            continue
        person.set_group_preferences([resolve_group_key(scheme, t) for t in titles])
    return skipped


def set_connections(scheme: Scheme, rows: Union[str, Iterable[Sequence[str]]]) -> List[str]:
    """
    Each row: primary_id, connected_id, ... The primary's connections are
    replaced. Dangling targets are left for the validator to prune.
    """
    skipped = []
    for row in _rows(rows):
        primary_id, others = row[0], row[1:]
        if not primary_id:
            _skip(skipped, f"Missing person id in connection row: {', '.join(row)}")
            continue
        person = scheme.get_person_by_id(primary_id)
        if person is None:
            _skip(skipped, f"No person found for connection row: {primary_id}")
            continue
        logger.debug(f"Assigning {len(others)} connections to {person}")
        person.set_connection_ids(others)
    return skipped
