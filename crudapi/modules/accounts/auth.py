"""Login with attempt blocking, token refresh and token resolution.

Per account the flow is a small state machine. An account is *active* while
``block_expires`` is unset or in the past and *blocked* while it lies in the
future. Blocks expire lazily: the next login attempt after ``block_expires``
notices it and resets the attempt counter before checking the password.

Every counter change is committed before the outcome (token or error) leaves
this service, so rolling back the request session on the error path cannot
undo a failed attempt.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable

from .exceptions import AccountBlockedError, AccountNotFoundError, IncorrectPasswordError, MalformedIdError
from .models import AccessLogEntry, Account, AccountInfo, AuthResult, RequestContext
from .repository import AccountRepository

if TYPE_CHECKING:
    from crudapi.core.crypto import PasswordHasher
    from crudapi.core.security import TokenService

logger = logging.getLogger(__name__)

LOGIN_ATTEMPTS = 5
HOURS_TO_BLOCK = 2


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_account_id(raw: str) -> int:
    try:
        account_id = int(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedIdError() from exc
    if account_id <= 0:
        raise MalformedIdError()
    return account_id


class AuthService:
    """Encapsulates credential checks and token issuance."""

    def __init__(
        self,
        accounts: AccountRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        *,
        max_attempts: int = LOGIN_ATTEMPTS,
        hours_to_block: int = HOURS_TO_BLOCK,
        include_verification: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._accounts = accounts
        self._hasher = hasher
        self._tokens = tokens
        self._max_attempts = max_attempts
        self._hours_to_block = hours_to_block
        self._include_verification = include_verification
        self._clock = clock

    async def login(self, email: str, password: str, context: RequestContext) -> AuthResult:
        account = await self._accounts.get_by_email(email.strip().lower())
        if account is None:
            raise AccountNotFoundError()

        now = self._clock()
        if account.is_blocked(now):
            raise AccountBlockedError()

        if account.block_has_expired(now, self._max_attempts):
            account = await self._accounts.update_account(account.id, login_attempts=0)
            await self._accounts.commit()

        if not self._hasher.verify(password, account.password_hash):
            await self._register_failed_attempt(account, now)

        account = await self._accounts.update_account(account.id, login_attempts=0)
        return await self._issue_token(account, context)

    async def refresh_token(self, token: str, context: RequestContext) -> str:
        account = await self.resolve_token(token)
        result = await self._issue_token(account, context)
        return result.token

    async def resolve_token(self, token: str) -> Account:
        """Return the account a bearer token belongs to."""
        account_id = parse_account_id(self._tokens.decode_access_token(token))
        account = await self._accounts.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    async def _register_failed_attempt(self, account: Account, now: datetime) -> None:
        attempts = await self._accounts.increment_login_attempts(account.id)
        if attempts <= self._max_attempts:
            await self._accounts.commit()
            raise IncorrectPasswordError()

        block_expires = now + timedelta(hours=self._hours_to_block)
        await self._accounts.update_account(account.id, block_expires=block_expires)
        await self._accounts.commit()
        logger.warning("Account %s blocked until %s after %d failed logins", account.id, block_expires, attempts)
        raise AccountBlockedError()

    async def _issue_token(self, account: Account, context: RequestContext) -> AuthResult:
        await self._accounts.add_access_log(
            AccessLogEntry(
                email=account.email,
                ip=context.ip,
                browser=context.browser,
                country=context.country,
            )
        )
        await self._accounts.commit()
        return AuthResult(
            token=self._tokens.create_access_token(account.id),
            user=AccountInfo.from_account(account, include_verification=self._include_verification),
        )


__all__ = ["AuthService", "HOURS_TO_BLOCK", "LOGIN_ATTEMPTS", "parse_account_id", "utcnow"]
