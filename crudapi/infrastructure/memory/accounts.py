"""In-memory account and password reset repositories."""

from __future__ import annotations

from typing import Any

from crudapi.modules.accounts.exceptions import AccountNotFoundError
from crudapi.modules.accounts.models import AccessLogEntry, Account, PasswordReset
from crudapi.modules.common.exceptions import NotFoundError

from .store import InMemorySession

USERS = "users"
USER_ACCESS = "user_access"
FORGOT_PASSWORDS = "forgot_passwords"


class InMemoryAccountRepository:
    def __init__(self, session: InMemorySession) -> None:
        self._session = session

    @property
    def access_log(self) -> list[AccessLogEntry]:
        return [
            AccessLogEntry(
                email=row["email"],
                ip=row["ip"],
                browser=row["browser"],
                country=row["country"],
                created_at=row["created_at"],
            )
            for row in self._session.table(USER_ACCESS).values()
        ]

    # ── read operations ──────────────────────────────────────

    async def get_by_id(self, account_id: int) -> Account | None:
        record = self._session.table(USERS).get(account_id)
        return Account.from_record(record) if record is not None else None

    async def get_by_email(self, email: str) -> Account | None:
        for record in self._session.table(USERS).values():
            if record["email"] == email:
                return Account.from_record(record)
        return None

    async def get_unverified(self, verification: str) -> Account | None:
        for record in self._session.table(USERS).values():
            if record.get("verification") == verification and not record.get("verified"):
                return Account.from_record(record)
        return None

    # ── write operations ─────────────────────────────────────

    async def create_account(self, **values: Any) -> Account:
        defaults = {"role": "user", "verified": False, "login_attempts": 0, "block_expires": None}
        return Account.from_record(self._session.add(USERS, {**defaults, **values}))

    async def update_account(self, account_id: int, **values: Any) -> Account:
        record = self._session.touch(USERS, account_id, values)
        if record is None:
            raise AccountNotFoundError()
        return Account.from_record(record)

    async def increment_login_attempts(self, account_id: int) -> int:
        attempts = self._session.increment(USERS, account_id, "login_attempts")
        if attempts is None:
            raise AccountNotFoundError()
        return attempts

    async def add_access_log(self, entry: AccessLogEntry) -> None:
        self._session.add(
            USER_ACCESS,
            {"email": entry.email, "ip": entry.ip, "browser": entry.browser, "country": entry.country},
        )

    async def commit(self) -> None:
        await self._session.commit()


class InMemoryPasswordResetRepository:
    def __init__(self, session: InMemorySession) -> None:
        self._session = session

    async def create_request(
        self,
        *,
        email: str,
        verification: str,
        ip: str,
        browser: str,
        country: str,
    ) -> PasswordReset:
        record = self._session.add(
            FORGOT_PASSWORDS,
            {
                "email": email,
                "verification": verification,
                "used": False,
                "ip_request": ip,
                "browser_request": browser,
                "country_request": country,
            },
        )
        return self._to_domain(record)

    async def get_unused(self, verification: str) -> PasswordReset | None:
        for record in self._session.table(FORGOT_PASSWORDS).values():
            if record["verification"] == verification and not record["used"]:
                return self._to_domain(record)
        return None

    async def mark_used(self, reset_id: int, *, ip: str, browser: str, country: str) -> None:
        record = self._session.touch(
            FORGOT_PASSWORDS,
            reset_id,
            {"used": True, "ip_changed": ip, "browser_changed": browser, "country_changed": country},
        )
        if record is None:
            raise NotFoundError("NOT_FOUND_OR_ALREADY_USED")

    @staticmethod
    def _to_domain(record: dict[str, Any]) -> PasswordReset:
        return PasswordReset(
            id=record["id"],
            email=record["email"],
            verification=record["verification"],
            used=bool(record["used"]),
            created_at=record.get("created_at"),
        )
