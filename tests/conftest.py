"""
Shared pytest fixtures for the QA Scenario Hub test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - owner / owner_headers: registered user with a bearer token
    - project: project created by ``owner`` via the API
"""

import pytest

from app import create_app
from app.models import db as _db
from app.models.auth import User
from app.services.jwt_service import generate_access_token
from app.utils.crypto import hash_password

PRD_TEXT = (
    "Users can reserve a discounted surplus meal from a nearby store and "
    "pick it up within the store's pickup window."
)


def make_user(email, name="Tester", password="passw0rd!"):
    """Insert a user directly and return it (committed)."""
    user = User(email=email, name=name, password_hash=hash_password(password))
    _db.session.add(user)
    _db.session.commit()
    return user


def auth_headers(user):
    token = generate_access_token(user.id, user.email)["access_token"]
    return {"Authorization": f"Bearer {token}"}


def create_project(client, headers, **overrides):
    payload = {"title": "Lunch deals", "prd_content": PRD_TEXT, "platform": "CONSUMER_APP"}
    payload.update(overrides)
    res = client.post("/api/v1/projects", json=payload, headers=headers)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        app.extensions.pop("llm_gateway", None)
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def owner():
    return make_user("owner@monandol.io", name="Olivia Owner")


@pytest.fixture()
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture()
def project(client, owner_headers):
    """Project owned by ``owner``, created through the API."""
    return create_project(client, owner_headers)
