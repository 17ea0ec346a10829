"""Pytest configuration and fixtures.

The environment is prepared before the application is imported: an
in-memory SQLite database shared through a static pool and a fixed
session secret.
"""

import os

os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LEDGER_MAX_RETRIES"] = "5"
for _name in ("SUPER_USER_PHONE", "SUPER_USER_PASSWORD", "DB_RESET"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from salesboard.app import app
from salesboard.core import engine
from salesboard.models import User
from salesboard.services.passwords import hash_password
from salesboard.services.store import RecordStore

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fresh_database():
    """Recreate every table so each test starts empty."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def db_session():
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(db_session):
    return RecordStore(db_session)


@pytest.fixture
def make_user(store):
    """Insert a user directly, bypassing registration."""

    counter = {"n": 0}

    def _make(name="Agent", phone_number=None, id_number=None, is_admin=False,
              password=DEFAULT_PASSWORD):
        counter["n"] += 1
        n = counter["n"]
        return store.insert(
            User(
                name=name,
                phone_number=phone_number or f"+2547{n:08d}",
                id_number=id_number or f"{10000000 + n}",
                password_hash=hash_password(password),
                is_admin=is_admin,
            )
        )

    return _make


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def login_as(client):
    """Log the shared test client in as the given phone number."""

    def _login(phone_number, password=DEFAULT_PASSWORD):
        response = client.post(
            "/auth/login", json={"phone_number": phone_number, "password": password}
        )
        assert response.status_code == 200, response.text
        return response

    return _login


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", phone_number="+254799999999", is_admin=True)


@pytest.fixture
def admin_client(client, admin, login_as):
    login_as(admin.phone_number)
    return client
