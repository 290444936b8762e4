"""
Shared fixtures.

Environment is set before the app is imported: the database and token
modules read their configuration at import time.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DIGEST_SCHEDULER_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from database import build_engine, get_session  # noqa: E402
from main import app  # noqa: E402
from models import User  # noqa: E402
from utils.jwt import create_jwt  # noqa: E402
from utils.passwords import hash_password  # noqa: E402

ALICE_PASSWORD = "alice-password"
BOB_PASSWORD = "bob-password"


@pytest.fixture()
def engine():
    """Fresh in-memory database per test, shared across threads"""
    engine = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def users(session):
    """Two accounts, provisioned the way an operator would: with bcrypt hashes"""
    alice = User(name="Alice", email="alice@example.com", password=hash_password(ALICE_PASSWORD, rounds=4))
    bob = User(name="Bob", email="bob@example.com", password=hash_password(BOB_PASSWORD, rounds=4))
    session.add(alice)
    session.add(bob)
    session.commit()
    session.refresh(alice)
    session.refresh(bob)
    return {"alice": alice, "bob": bob}


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_jwt(user.id, user.email)}"}


@pytest.fixture()
def alice_headers(users):
    return bearer(users["alice"])


@pytest.fixture()
def bob_headers(users):
    return bearer(users["bob"])
