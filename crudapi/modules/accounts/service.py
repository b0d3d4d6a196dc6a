"""Domain services for registration, verification and password resets."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from typing import TYPE_CHECKING

from crudapi.modules.common.exceptions import NotFoundError

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import Account, AccountCreateInput, AccountInfo, AuthResult, PasswordReset, RequestContext
from .repository import AccountRepository, PasswordResetRepository

if TYPE_CHECKING:
    from crudapi.core.crypto import PasswordHasher
    from crudapi.core.security import TokenService

logger = logging.getLogger(__name__)


class AccountService:
    """Encapsulates account lifecycle use cases other than login."""

    def __init__(
        self,
        accounts: AccountRepository,
        resets: PasswordResetRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        *,
        include_verification: bool = False,
    ) -> None:
        self._accounts = accounts
        self._resets = resets
        self._hasher = hasher
        self._tokens = tokens
        self._include_verification = include_verification

    async def get_by_id(self, account_id: int) -> Account:
        account = await self._accounts.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    async def register(self, payload: AccountCreateInput) -> AuthResult:
        email = payload.email.strip().lower()
        if await self._accounts.get_by_email(email) is not None:
            raise AccountAlreadyExistsError()

        values = asdict(payload)
        values.pop("password")
        values["email"] = email
        account = await self._accounts.create_account(
            **values,
            password=self._hasher.hash(payload.password),
            verification=str(uuid.uuid4()),
            verified=False,
            login_attempts=0,
        )
        await self._accounts.commit()
        logger.info("Registered account %s", account.id)
        return AuthResult(
            token=self._tokens.create_access_token(account.id),
            user=AccountInfo.from_account(account, include_verification=self._include_verification),
        )

    async def verify(self, verification: str) -> Account:
        account = await self._accounts.get_unverified(verification)
        if account is None:
            raise NotFoundError("NOT_FOUND_OR_ALREADY_VERIFIED")
        return await self._accounts.update_account(account.id, verified=True)

    async def forgot_password(self, email: str, context: RequestContext) -> PasswordReset:
        account = await self._accounts.get_by_email(email.strip().lower())
        if account is None:
            raise AccountNotFoundError()
        reset = await self._resets.create_request(
            email=account.email,
            verification=str(uuid.uuid4()),
            ip=context.ip,
            browser=context.browser,
            country=context.country,
        )
        # E-mail delivery is handled outside this service.
        logger.info("Password reset requested for account %s", account.id)
        return reset

    async def reset_password(self, verification: str, password: str, context: RequestContext) -> None:
        reset = await self._resets.get_unused(verification)
        if reset is None:
            raise NotFoundError("NOT_FOUND_OR_ALREADY_USED")
        account = await self._accounts.get_by_email(reset.email)
        if account is None:
            raise AccountNotFoundError()
        await self._accounts.update_account(account.id, password=self._hasher.hash(password))
        await self._resets.mark_used(reset.id, ip=context.ip, browser=context.browser, country=context.country)

    def forgot_password_response(self, reset: PasswordReset) -> dict[str, str]:
        response = {"msg": "RESET_EMAIL_SENT"}
        if self._include_verification:
            response["verification"] = reset.verification
        return response


__all__ = ["AccountService"]
