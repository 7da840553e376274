# tests/conftest.py
import os
import tempfile

# point the app at a throwaway database before any groupsort module reads settings
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(tempfile.mkdtemp(), 'groupsort_test.db')}")

import pytest

from tests.utils import make_person
from groupsort.domain.models import Group, Scheme


@pytest.fixture
def abc_scheme():
    """People A, B, C with A<->B connected; two groups of two; preferences off."""
    people = [
        make_person("A", connections=["B"]),
        make_person("B", connections=["A"]),
        make_person("C"),
    ]
    groups = [Group("G1", 2), Group("G2", 2)]
    return Scheme(title="abc", people=people, groups=groups, use_group_preferences=False)
