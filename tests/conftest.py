"""
Shared fixtures for the crudapi test suite.
"""
from datetime import datetime, timedelta, timezone

import pytest

from crudapi.core.crypto import PasswordHasher
from crudapi.core.security import TokenService
from crudapi.infrastructure.memory import (
    InMemoryAccountRepository,
    InMemoryPasswordResetRepository,
    InMemorySession,
    InMemoryStore,
)

TEST_SECRET = "test-secret-key"


class FakeClock:
    """Manually advanced clock for lockout tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET, encrypt_tokens=True)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def memory_session(store: InMemoryStore) -> InMemorySession:
    return InMemorySession(store)


@pytest.fixture
def accounts(memory_session: InMemorySession) -> InMemoryAccountRepository:
    return InMemoryAccountRepository(memory_session)


@pytest.fixture
def resets(memory_session: InMemorySession) -> InMemoryPasswordResetRepository:
    return InMemoryPasswordResetRepository(memory_session)


@pytest.fixture
async def alice(accounts: InMemoryAccountRepository, hasher: PasswordHasher):
    account = await accounts.create_account(
        first_name="Alice",
        last_name="Doe",
        email="alice@example.com",
        password=hasher.hash("correct-horse"),
        verification="verify-alice",
        verified=True,
    )
    await accounts.commit()
    return account
