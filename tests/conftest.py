"""Shared test fixtures for accounts-core."""

import os
import tempfile
import sqlite3

import pytest

from accounts_core.main import app
from accounts_core.config import settings
from accounts_core.db import Core, get_core, init_db
from accounts_core.schema import SCHEMA_PATH
from accounts_core.schemas import AuthProvider
from accounts_core.auth import passwords
from accounts_core.auth.token import generate_access_token

# Fixed, old timestamp for seeded accounts so updated_at bumps are observable
SEED_TIMESTAMP = "2025-01-01T00:00:00Z"
TEST_PASSWORD = "TestPass123"


@pytest.fixture(autouse=True)
def fast_bcrypt():
    """Use the minimum bcrypt work factor for speed."""
    original = settings.bcrypt_work_factor
    settings.bcrypt_work_factor = 4
    yield
    settings.bcrypt_work_factor = original


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:", isolation_level=None)
    db.row_factory = sqlite3.Row
    db.execute("PRAGMA foreign_keys = ON")
    db.executescript(SCHEMA_PATH.read_text())

    yield db

    db.close()


@pytest.fixture
def core(test_db):
    """Non-atomic Core over the in-memory database."""
    return Core(test_db)


@pytest.fixture
def local_account(core):
    """A LOCAL account with a known password.

    Returns a tuple of (account, password).
    """
    account = core.account.create(
        email="ada@example.com",
        auth_provider=AuthProvider.LOCAL,
        created_at=SEED_TIMESTAMP,
        full_name="Ada Lovelace",
        password_hash=passwords.hash_password(TEST_PASSWORD),
    )
    return account, TEST_PASSWORD


@pytest.fixture
def google_account(core):
    """A GOOGLE-linked account without a password."""
    return core.account.create(
        email="grace@example.com",
        auth_provider=AuthProvider.GOOGLE,
        created_at=SEED_TIMESTAMP,
        full_name="Grace Hopper",
        provider_subject="google-sub-grace",
    )


@pytest.fixture
def client():
    """Create test client for API testing.

    Uses a temp file database so every Core opened by a request sees the
    same data. Each test gets a fresh database.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(db_path)

    original_db_path = settings.database_path
    settings.database_path = db_path
    try:
        init_db()

        app.config["TESTING"] = True
        with app.test_client() as client:
            yield client

    finally:
        settings.database_path = original_db_path
        if os.path.exists(db_path):
            os.unlink(db_path)


def seed_account(
    email: str,
    auth_provider: AuthProvider = AuthProvider.LOCAL,
    password: str | None = TEST_PASSWORD,
    full_name: str | None = "Test User",
    provider_subject: str | None = None,
):
    """Insert an account into the database the client fixture points at."""
    with get_core(atomic=True) as core:
        return core.account.create(
            email=email,
            auth_provider=auth_provider,
            created_at=SEED_TIMESTAMP,
            full_name=full_name,
            password_hash=passwords.hash_password(password) if password else None,
            provider_subject=provider_subject,
        )


@pytest.fixture
def api_account(client):
    """A LOCAL account stored in the client's database."""
    return seed_account("ada@example.com", full_name="Ada Lovelace")


@pytest.fixture
def api_google_account(client):
    """A GOOGLE account stored in the client's database."""
    return seed_account(
        "grace@example.com",
        auth_provider=AuthProvider.GOOGLE,
        password=None,
        full_name="Grace Hopper",
        provider_subject="google-sub-grace",
    )


@pytest.fixture
def auth_headers(api_account):
    """Authorization header with a valid token for api_account."""
    return {"Authorization": f"Bearer {generate_access_token(api_account.email)}"}


@pytest.fixture
def google_auth_headers(api_google_account):
    """Authorization header with a valid token for api_google_account."""
    return {"Authorization": f"Bearer {generate_access_token(api_google_account.email)}"}
