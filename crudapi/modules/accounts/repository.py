"""Repository protocols for accounts and password resets."""

from __future__ import annotations

from typing import Any, Protocol

from .models import AccessLogEntry, Account, PasswordReset


class AccountRepository(Protocol):
    """Abstract repository interface for account persistence.

    Mutations become durable only on ``commit``; callers that must keep a
    change even when the surrounding request fails commit explicitly.
    """

    async def get_by_id(self, account_id: int) -> Account | None:
        ...

    async def get_by_email(self, email: str) -> Account | None:
        ...

    async def get_unverified(self, verification: str) -> Account | None:
        ...

    async def create_account(self, **values: Any) -> Account:
        ...

    async def update_account(self, account_id: int, **values: Any) -> Account:
        ...

    async def increment_login_attempts(self, account_id: int) -> int:
        """Atomically add one failed attempt and return the new count."""
        ...

    async def add_access_log(self, entry: AccessLogEntry) -> None:
        ...

    async def commit(self) -> None:
        ...


class PasswordResetRepository(Protocol):
    async def create_request(
        self,
        *,
        email: str,
        verification: str,
        ip: str,
        browser: str,
        country: str,
    ) -> PasswordReset:
        ...

    async def get_unused(self, verification: str) -> PasswordReset | None:
        ...

    async def mark_used(self, reset_id: int, *, ip: str, browser: str, country: str) -> None:
        ...
