# tests/test_api.py
"""
Integration tests for the HTTP surface.

Flow: create a scheme, seed people/groups/connections/preferences, run the
balanced assignment, move someone by hand, save and load it back.
"""
import pytest
from fastapi.testclient import TestClient

from main import app
from groupsort.services.scheme_service import workspaces

client = TestClient(app)

BASE = "/api/v1/schemes"

PEOPLE = [
    {"id": "a", "first_name": "Ada", "last_name": "Lovelace", "connections": ["b"]},
    {"id": "b", "first_name": "Bob", "last_name": "Byte", "connections": ["a"]},
    {"id": "c", "first_name": "Cy", "last_name": "Cle"},
    {"id": "d", "first_name": "Di", "last_name": "Git"},
]
GROUPS = [
    {"title": "Blue", "max_size": 2, "id": "blue"},
    {"title": "Red", "max_size": 2, "id": "red"},
]


@pytest.fixture(autouse=True)
def fresh_workspaces():
    workspaces.clear()
    yield
    workspaces.clear()


def _seed(title="camp", use_group_preferences=False):
    resp = client.post(f"{BASE}/", json={"title": title, "use_group_preferences": use_group_preferences})
    assert resp.status_code == 200
    assert client.put(f"{BASE}/{title}/people", json=PEOPLE).status_code == 200
    assert client.put(f"{BASE}/{title}/groups", json=GROUPS).status_code == 200

# -------------------------------
# Happy path
# -------------------------------

def test_health():
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_full_assignment_flow():
    _seed()

    resp = client.put(f"{BASE}/camp/preferences", json={"lines": ["c, Red", "zz, Blue"]})
    assert resp.status_code == 200
    assert "Person not found for group preference: zz" in resp.json()["warnings"]

    resp = client.post(f"{BASE}/camp/autoassign", json={"algorithm": "balanced", "seed": 3})
    assert resp.status_code == 200
    assert resp.json()["statistics"]["unassigned"] == 0

    doc = client.get(f"{BASE}/camp").json()
    assert doc["version"] == "2.5.1"
    groups = {g["id"]: g["members"] for g in doc["groups"]}
    together = [members for members in groups.values() if "a" in members][0]
    assert "b" in together

    resp = client.post(f"{BASE}/camp/reassign", json={"person_id": "d", "group_id": None})
    assert resp.status_code == 200
    assert resp.json()["statistics"]["unassigned"] == 1

    resp = client.post(f"{BASE}/camp/save", json={"name": "camp-v1"})
    assert resp.status_code == 200
    assert "camp-v1" in client.get(f"{BASE}/saved").json()["saved"]

    resp = client.post(f"{BASE}/copy/load/camp-v1")
    assert resp.status_code == 200
    assert client.get(f"{BASE}/copy").json()["groups"] == client.get(f"{BASE}/camp").json()["groups"]


def test_rename_and_highlight():
    _seed(use_group_preferences=True)
    client.put(f"{BASE}/camp/preferences", json={"lines": ["a, Red, Blue", "b, Blue, Red"]})

    resp = client.patch(f"{BASE}/camp/groups/red", json={"title": "Crimson"})
    assert resp.status_code == 200

    resp = client.get(f"{BASE}/camp/groups/red/highlighted")
    assert resp.json()["people"] == [{"id": "a", "rank": 1}, {"id": "b", "rank": 2}]


def test_options():
    _seed()
    resp = client.patch(f"{BASE}/camp/options", json={"use_group_preferences": True, "rank_threshold": 1})
    assert resp.json() == {"use_group_preferences": True, "rank_threshold": 1}

# -------------------------------
# Error mapping
# -------------------------------

def test_unknown_scheme_is_404():
    assert client.get(f"{BASE}/nothing").status_code == 404


def test_duplicate_people_is_409():
    client.post(f"{BASE}/", json={"title": "dup"})
    resp = client.put(f"{BASE}/dup/people", json=[PEOPLE[0], PEOPLE[0]])
    assert resp.status_code == 409
    assert "Duplicate person ID: a" in resp.json()["detail"]["errors"]
    assert client.get(f"{BASE}/dup").json()["people"] == []


def test_unknown_algorithm_is_422():
    _seed()
    resp = client.post(f"{BASE}/camp/autoassign", json={"algorithm": "optimal"})
    assert resp.status_code == 422


def test_full_group_is_409():
    _seed()
    client.post(f"{BASE}/camp/reassign", json={"person_id": "a", "group_id": "blue"})
    client.post(f"{BASE}/camp/reassign", json={"person_id": "b", "group_id": "blue"})
    resp = client.post(f"{BASE}/camp/reassign", json={"person_id": "c", "group_id": "blue"})
    assert resp.status_code == 409


def test_malformed_import_is_422():
    resp = client.post(f"{BASE}/broken/import", json={"people": "nope"})
    assert resp.status_code == 422
    assert "broken" not in workspaces.names()


def test_load_missing_save_is_404():
    resp = client.post(f"{BASE}/ghost/load/never-saved")
    assert resp.status_code == 404
    assert "ghost" not in workspaces.names()


def test_duplicate_create_is_409():
    _seed()
    resp = client.post(f"{BASE}/", json={"title": "camp"})
    assert resp.status_code == 409
    assert [p["id"] for p in client.get(f"{BASE}/camp").json()["people"]] == ["a", "b", "c", "d"]


def test_oversized_group_is_422():
    client.post(f"{BASE}/", json={"title": "huge"})
    resp = client.put(f"{BASE}/huge/groups", json=[{"title": "Hall", "max_size": 10**10}])
    assert resp.status_code == 422
    assert client.get(f"{BASE}/huge").json()["groups"] == []


def test_highlight_unknown_group_is_404():
    _seed()
    assert client.get(f"{BASE}/camp/groups/nowhere/highlighted").status_code == 404
