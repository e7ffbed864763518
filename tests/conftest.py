"""
Pytest configuration and fixtures for the family tree viewer.

Provides:
- Sample member lists (flat, as the backend sends them)
- Envelope helpers to fake backend responses
- A Flask app/client wired to a fake backend URL
"""

import pytest
from unittest.mock import MagicMock

from silsilah.models import Gender, Member


# ============================================================
# MEMBER FIXTURES
# ============================================================

def make_member(id, fullname=None, gender=Gender.MALE, **kwargs):
    """Shorthand Member constructor; list fields accept lists."""
    for key in ("children_ids", "parent_ids"):
        if key in kwargs:
            kwargs[key] = tuple(kwargs[key])
    return Member(id=id, fullname=fullname or f"Person {id}", gender=gender, **kwargs)


@pytest.fixture
def simple_members():
    """Root with two children, in order Child1, Child2."""
    return [
        make_member("1", "Root", children_ids=["2", "3"]),
        make_member("2", "Child1", depth=1),
        make_member("3", "Child2", gender=Gender.FEMALE, depth=1),
    ]


@pytest.fixture
def family_members():
    """
    Three generations:
        1 (+2)
        ├── 3 (+4) ── 6, 7
        └── 5
    """
    return [
        make_member("1", "Soedarmo", spouse_id="2", children_ids=["3", "5"], birth_date="1920-03-12",
                    death_date="1998-11-02"),
        make_member("2", "Aminah", gender=Gender.FEMALE, spouse_id="1", children_ids=["3", "5"]),
        make_member("3", "Bambang", spouse_id="4", children_ids=["6", "7"], depth=1, birth_date="1948-08-17"),
        make_member("4", "Rini", gender=Gender.FEMALE, spouse_id="3", depth=1),
        make_member("5", "Yuni", gender=Gender.FEMALE, depth=1),
        make_member("6", "Dewi", gender=Gender.FEMALE, depth=2),
        make_member("7", "Eko", depth=2),
    ]


# ============================================================
# BACKEND RESPONSE HELPERS
# ============================================================

def envelope(data, code=200, message="OK"):
    return {"code": code, "message": message, "data": data,
            "timestamp": "2026-01-01T00:00:00Z", "version": "1.0.0"}


def fake_response(status=200, body=None, text=None):
    """A MagicMock standing in for requests.Response."""
    r = MagicMock()
    r.status_code = status
    r.ok = 200 <= status < 300
    if body is not None:
        r.json.return_value = body
        r.text = str(body)
    else:
        r.json.side_effect = ValueError("No JSON object could be decoded")
        r.text = text or ""
    return r


TREE_PAYLOAD = {
    "rootId": "1",
    "members": [
        {"id": "1", "fullname": "Root", "gender": "male", "depth": 0, "childrenIds": ["2", "3"]},
        {"id": "2", "fullname": "Child1", "gender": "male", "depth": 1},
        {"id": "3", "fullname": "Child2", "gender": "female", "depth": 1},
    ],
}

DETAIL_PAYLOAD = {
    "id": 2,
    "fullname": "Child One",
    "nickname": "One",
    "gender": "male",
    "birth_date": "1980-08-17",
    "death_date": None,
    "photo_url": None,
    "bio": None,
    "detail": {
        "profession": "Guru",
        "domicile": "Bandung",
        "full_address": "Jl. Dago 1",
        "whatsapp_number": "+62 812-0000-1111",
    },
}


# ============================================================
# APP FIXTURES
# ============================================================

@pytest.fixture
def app():
    from silsilah.main import create_app
    app = create_app({
        "TESTING": True,
        "API_BASE_URL": "http://backend.test",
        "TREE_ID": "16",
        "HTTP_TIMEOUT": 1.0,
    })
    yield app
    app.extensions["silsilah.executor"].shutdown(wait=True)


@pytest.fixture
def client(app):
    return app.test_client()
