"""Tests for the login state machine and the other account use cases."""
from datetime import timedelta

import pytest

from crudapi.infrastructure.memory import InMemoryAccountRepository, InMemorySession
from crudapi.modules.accounts import (
    AccountAlreadyExistsError,
    AccountBlockedError,
    AccountCreateInput,
    AccountNotFoundError,
    AccountService,
    AuthService,
    IncorrectPasswordError,
    MalformedIdError,
    RequestContext,
)
from crudapi.modules.common import NotFoundError

CONTEXT = RequestContext(ip="10.0.0.1", browser="pytest", country="NL")


@pytest.fixture
def auth(accounts, hasher, tokens, clock) -> AuthService:
    return AuthService(accounts, hasher, tokens, clock=clock)


async def _fail(auth: AuthService, times: int) -> None:
    for _ in range(times):
        with pytest.raises(IncorrectPasswordError):
            await auth.login("alice@example.com", "wrong", CONTEXT)


async def test_successful_login_returns_token_and_logs_access(auth, accounts, tokens, alice):
    result = await auth.login("Alice@Example.com ", "correct-horse", CONTEXT)

    assert tokens.decode_access_token(result.token) == str(alice.id)
    assert result.user.email == "alice@example.com"
    assert result.user.name == "Alice Doe"
    assert result.user.verification is None
    assert len(accounts.access_log) == 1
    assert accounts.access_log[0].ip == "10.0.0.1"


async def test_unknown_email(auth):
    with pytest.raises(AccountNotFoundError) as excinfo:
        await auth.login("nobody@example.com", "whatever", CONTEXT)

    assert excinfo.value.status_code == 404


async def test_five_failures_are_wrong_password_then_blocked(auth, accounts, clock, alice):
    await _fail(auth, 5)
    account = await accounts.get_by_id(alice.id)
    assert account.login_attempts == 5
    assert account.block_expires is None

    with pytest.raises(AccountBlockedError) as excinfo:
        await auth.login("alice@example.com", "wrong", CONTEXT)

    assert excinfo.value.message == "BLOCKED_USER"
    account = await accounts.get_by_id(alice.id)
    assert account.login_attempts == 6
    assert account.block_expires == clock.now + timedelta(hours=2)
    assert accounts.access_log == []


async def test_blocked_account_ignores_correct_password(auth, accounts, clock, alice):
    await _fail(auth, 5)
    with pytest.raises(AccountBlockedError):
        await auth.login("alice@example.com", "wrong", CONTEXT)

    clock.advance(hours=1, minutes=59)
    with pytest.raises(AccountBlockedError):
        await auth.login("alice@example.com", "correct-horse", CONTEXT)

    account = await accounts.get_by_id(alice.id)
    assert account.login_attempts == 6


async def test_block_expires_lazily(auth, accounts, clock, alice):
    await _fail(auth, 5)
    with pytest.raises(AccountBlockedError):
        await auth.login("alice@example.com", "wrong", CONTEXT)

    clock.advance(hours=2, seconds=1)
    # The first attempt after expiry starts counting from zero again.
    await _fail(auth, 1)
    account = await accounts.get_by_id(alice.id)
    assert account.login_attempts == 1

    result = await auth.login("alice@example.com", "correct-horse", CONTEXT)
    assert result.user.id == alice.id
    account = await accounts.get_by_id(alice.id)
    assert account.login_attempts == 0


async def test_success_resets_attempt_counter(auth, accounts, alice):
    await _fail(auth, 3)

    await auth.login("alice@example.com", "correct-horse", CONTEXT)

    account = await accounts.get_by_id(alice.id)
    assert account.login_attempts == 0
    assert len(accounts.access_log) == 1


async def test_failed_attempt_survives_rollback(auth, store, memory_session, alice):
    await _fail(auth, 1)

    await memory_session.rollback()

    fresh = InMemoryAccountRepository(InMemorySession(store))
    account = await fresh.get_by_id(alice.id)
    assert account.login_attempts == 1


async def test_concurrent_failures_are_all_counted(store, hasher, tokens, clock, alice):
    first = AuthService(InMemoryAccountRepository(InMemorySession(store)), hasher, tokens, clock=clock)
    second = AuthService(InMemoryAccountRepository(InMemorySession(store)), hasher, tokens, clock=clock)

    with pytest.raises(IncorrectPasswordError):
        await first.login("alice@example.com", "wrong", CONTEXT)
    with pytest.raises(IncorrectPasswordError):
        await second.login("alice@example.com", "wrong", CONTEXT)

    fresh = InMemoryAccountRepository(InMemorySession(store))
    account = await fresh.get_by_id(alice.id)
    assert account.login_attempts == 2


async def test_sessions_only_write_back_their_own_columns(store, alice):
    editor = InMemoryAccountRepository(InMemorySession(store))
    counter = InMemoryAccountRepository(InMemorySession(store))

    await editor.update_account(alice.id, city="Utrecht")
    assert await counter.increment_login_attempts(alice.id) == 1
    await counter.commit()
    await editor.commit()

    account = await InMemoryAccountRepository(InMemorySession(store)).get_by_id(alice.id)
    assert account.city == "Utrecht"
    assert account.login_attempts == 1


async def test_uncommitted_changes_are_discarded_on_rollback(accounts, memory_session, alice):
    await accounts.update_account(alice.id, first_name="Mallory")

    await memory_session.rollback()

    account = await accounts.get_by_id(alice.id)
    assert account.first_name == "Alice"


async def test_custom_threshold(accounts, hasher, tokens, clock, alice):
    auth = AuthService(accounts, hasher, tokens, max_attempts=1, hours_to_block=1, clock=clock)

    await _fail(auth, 1)
    with pytest.raises(AccountBlockedError):
        await auth.login("alice@example.com", "wrong", CONTEXT)

    account = await accounts.get_by_id(alice.id)
    assert account.block_expires == clock.now + timedelta(hours=1)


async def test_resolve_and_refresh_token(auth, accounts, tokens, alice):
    token = tokens.create_access_token(alice.id)

    account = await auth.resolve_token(token)
    assert account.email == "alice@example.com"

    refreshed = await auth.refresh_token(token, CONTEXT)
    assert tokens.decode_access_token(refreshed) == str(alice.id)
    assert len(accounts.access_log) == 1


async def test_resolve_token_with_malformed_subject(auth, tokens):
    with pytest.raises(MalformedIdError):
        await auth.resolve_token(tokens.create_access_token("not-an-id"))


async def test_resolve_token_for_deleted_account(auth, tokens):
    with pytest.raises(AccountNotFoundError):
        await auth.resolve_token(tokens.create_access_token(999))


@pytest.fixture
def account_service(accounts, resets, hasher, tokens) -> AccountService:
    return AccountService(accounts, resets, hasher, tokens, include_verification=True)


async def test_register_verify_and_duplicate(account_service, accounts, tokens, hasher):
    payload = AccountCreateInput(email=" Bob@Example.com", password="hunter22", first_name="Bob")

    result = await account_service.register(payload)

    assert result.user.email == "bob@example.com"
    assert result.user.verified is False
    assert result.user.verification
    stored = await accounts.get_by_email("bob@example.com")
    assert stored.password_hash != "hunter22"
    assert hasher.verify("hunter22", stored.password_hash)

    with pytest.raises(AccountAlreadyExistsError):
        await account_service.register(payload)

    verified = await account_service.verify(result.user.verification)
    assert verified.verified is True
    with pytest.raises(NotFoundError) as excinfo:
        await account_service.verify(result.user.verification)
    assert excinfo.value.message == "NOT_FOUND_OR_ALREADY_VERIFIED"


async def test_forgot_and_reset_password(account_service, accounts, hasher, alice):
    reset = await account_service.forgot_password("alice@example.com", CONTEXT)
    response = account_service.forgot_password_response(reset)
    assert response == {"msg": "RESET_EMAIL_SENT", "verification": reset.verification}

    await account_service.reset_password(reset.verification, "new-secret", CONTEXT)

    account = await accounts.get_by_id(alice.id)
    assert hasher.verify("new-secret", account.password_hash)
    with pytest.raises(NotFoundError) as excinfo:
        await account_service.reset_password(reset.verification, "again", CONTEXT)
    assert excinfo.value.message == "NOT_FOUND_OR_ALREADY_USED"


async def test_forgot_password_for_unknown_email(account_service):
    with pytest.raises(AccountNotFoundError):
        await account_service.forgot_password("ghost@example.com", CONTEXT)
