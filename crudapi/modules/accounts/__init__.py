"""Accounts: registration, login with attempt blocking, password resets."""

from .auth import AuthService
from .exceptions import (
    AccountAlreadyExistsError,
    AccountBlockedError,
    AccountError,
    AccountNotFoundError,
    IncorrectPasswordError,
    MalformedIdError,
)
from .models import (
    ADMIN_ROLES,
    ROLES,
    AccessLogEntry,
    Account,
    AccountCreateInput,
    AccountInfo,
    AuthResult,
    PasswordReset,
    RequestContext,
)
from .repository import AccountRepository, PasswordResetRepository
from .service import AccountService

__all__ = [
    "ADMIN_ROLES",
    "ROLES",
    "AccessLogEntry",
    "Account",
    "AccountAlreadyExistsError",
    "AccountBlockedError",
    "AccountCreateInput",
    "AccountError",
    "AccountInfo",
    "AccountNotFoundError",
    "AccountRepository",
    "AccountService",
    "AuthResult",
    "AuthService",
    "IncorrectPasswordError",
    "MalformedIdError",
    "PasswordReset",
    "PasswordResetRepository",
    "RequestContext",
]
