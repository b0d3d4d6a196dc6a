"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

ROLES = ("user", "admin", "superadmin", "developer", "agent", "owner")
ADMIN_ROLES = ("admin", "superadmin")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps (e.g. from SQLite) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@dataclass(slots=True)
class Account:
    id: int
    email: str
    role: str
    verified: bool
    password_hash: str = field(repr=False)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    verification: Optional[str] = field(default=None, repr=False)
    login_attempts: int = 0
    block_expires: Optional[datetime] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    url_twitter: Optional[str] = None
    url_github: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def is_blocked(self, now: datetime) -> bool:
        expires = as_utc(self.block_expires)
        return expires is not None and expires > now

    def block_has_expired(self, now: datetime, threshold: int) -> bool:
        expires = as_utc(self.block_expires)
        return self.login_attempts > threshold and (expires is None or expires <= now)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Account":
        return cls(
            id=record["id"],
            email=record["email"],
            role=record.get("role") or "user",
            verified=bool(record.get("verified")),
            password_hash=record.get("password") or "",
            first_name=record.get("first_name"),
            last_name=record.get("last_name"),
            verification=record.get("verification"),
            login_attempts=int(record.get("login_attempts") or 0),
            block_expires=as_utc(record.get("block_expires")),
            phone=record.get("phone"),
            city=record.get("city"),
            country=record.get("country"),
            url_twitter=record.get("url_twitter"),
            url_github=record.get("url_github"),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )


@dataclass(slots=True)
class AccountCreateInput:
    email: str
    password: str
    first_name: str
    last_name: Optional[str] = None
    role: str = "user"
    phone: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    url_twitter: Optional[str] = None
    url_github: Optional[str] = None


@dataclass(slots=True)
class RequestContext:
    """Where a request came from, as recorded in the audit tables."""

    ip: str = "unknown"
    browser: str = ""
    country: str = "XX"


@dataclass(slots=True)
class AccessLogEntry:
    email: str
    ip: str
    browser: str
    country: str
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class PasswordReset:
    id: int
    email: str
    verification: str
    used: bool = False
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class AccountInfo:
    id: int
    name: str
    email: str
    role: str
    verified: bool
    verification: Optional[str] = None

    @classmethod
    def from_account(cls, account: Account, *, include_verification: bool = False) -> "AccountInfo":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            role=account.role,
            verified=account.verified,
            verification=account.verification if include_verification else None,
        )


@dataclass(slots=True)
class AuthResult:
    token: str
    user: AccountInfo
