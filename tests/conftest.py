"""
Pytest configuration for JWT auth API tests.
Sets up the Python path and common test fixtures.
"""

import os
import sys
from pathlib import Path
from datetime import datetime, timezone
from uuid import uuid4
import pytest

# Add the project root to Python path for all tests
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set up test environment variables
os.environ.setdefault("DATABASE_HOST", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "mydb")
os.environ.setdefault("DATABASE_USER", "myuser")
os.environ.setdefault("DATABASE_PASSWORD", "mypassword")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only")
os.environ.setdefault("REVOCATION_BACKEND", "memory")
os.environ.setdefault("LOG_FILE_PATH", "")

from app.auth.auth_service import AuthService  # noqa: E402
from app.auth.exceptions import EmailAlreadyExistsError  # noqa: E402
from app.auth.jwt_utils import TokenCodec  # noqa: E402
from app.auth.revocation_registry import InMemoryRevocationRegistry  # noqa: E402
from app.utils.password_hashing import PasswordHasher  # noqa: E402
from app.psql_db_services.users_service import normalize_email  # noqa: E402

TEST_SIGNING_KEY = "unit-test-signing-key"
TEST_TTL_SECONDS = 3600
START_TIME = 1_760_000_000


# ============================================================================
# TEST DOUBLES
# ============================================================================


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FakeCredentialStore:
    """
    In-memory stand-in for UsersService.

    Set ``fail_with`` to an exception instance to make every lookup or
    insert raise it.
    """

    def __init__(self):
        self.users = {}
        self.fail_with = None

    def add_user(self, email: str, password: str, name: str = "Test User") -> dict:
        now = datetime.now(timezone.utc)
        user = {
            "user_id": uuid4(),
            "name": name,
            "email": normalize_email(email),
            "password_hash": PasswordHasher.hash_password(password),
            "created_at": now,
            "updated_at": now,
        }
        self.users[user["user_id"]] = user
        return dict(user)

    async def get_user_by_email(self, email_address: str):
        if self.fail_with:
            raise self.fail_with
        email_address = normalize_email(email_address)
        for user in self.users.values():
            if user["email"] == email_address:
                return dict(user)
        return None

    async def get_user_by_id(self, user_id):
        if self.fail_with:
            raise self.fail_with
        user = self.users.get(user_id)
        return dict(user) if user else None

    async def create_user(self, user_id, name, email, password_hash):
        if self.fail_with:
            raise self.fail_with
        email = normalize_email(email)
        if any(user["email"] == email for user in self.users.values()):
            raise EmailAlreadyExistsError(f"Email '{email}' already exists")
        now = datetime.now(timezone.utc)
        self.users[user_id] = {
            "user_id": user_id,
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "created_at": now,
            "updated_at": now,
        }
        created = dict(self.users[user_id])
        created.pop("password_hash")
        return created

    def verify_password(self, user, plaintext_password):
        password_hash = user.get("password_hash")
        if not password_hash:
            return False
        return PasswordHasher.verify_password(plaintext_password, password_hash)


# ============================================================================
# AUTHENTICATION FIXTURES FOR TESTING
# ============================================================================


@pytest.fixture
def clock():
    """Frozen clock shared by the codec and the registry."""
    return FrozenClock()


@pytest.fixture
def token_codec(clock):
    """HS256 codec with a one hour TTL driven by the frozen clock."""
    return TokenCodec(
        signing_key=TEST_SIGNING_KEY,
        algorithm="HS256",
        ttl_seconds=TEST_TTL_SECONDS,
        issuer=None,
        clock=clock,
    )


@pytest.fixture
def revocation_registry(clock):
    return InMemoryRevocationRegistry(clock=clock)


@pytest.fixture
def credential_store():
    return FakeCredentialStore()


@pytest.fixture
def registered_user(credential_store):
    """A user that already exists in the credential store."""
    user = credential_store.add_user("jane@example.com", "correct-horse", "Jane Doe")
    user["password"] = "correct-horse"
    return user


@pytest.fixture
def auth_service(credential_store, token_codec, revocation_registry):
    return AuthService(credential_store, token_codec, revocation_registry)
