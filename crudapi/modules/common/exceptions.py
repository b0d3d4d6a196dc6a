"""Error taxonomy shared by every module.

Each error carries the HTTP status the boundary should answer with and a
message code that clients match on. The HTTP layer only translates; the
services decide which kind of failure happened.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for all expected application failures."""

    status_code: int = 500
    default_message: str = "INTERNAL_ERROR"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = 404
    default_message = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    default_message = "ITEM_ALREADY_EXISTS"


class BlockedError(AppError):
    status_code = 409
    default_message = "BLOCKED_USER"


class IncorrectCredentialError(AppError):
    status_code = 409
    default_message = "WRONG_PASSWORD"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "UNAUTHORIZED"


class InvalidTokenError(UnauthorizedError):
    """A bearer token could not be unwrapped, verified or resolved."""

    default_message = "INVALID_TOKEN"


class ValidationFailedError(AppError):
    status_code = 422
    default_message = "VALIDATION_FAILED"


class InternalFailureError(AppError):
    status_code = 500
    default_message = "INTERNAL_ERROR"


__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "BlockedError",
    "IncorrectCredentialError",
    "UnauthorizedError",
    "InvalidTokenError",
    "ValidationFailedError",
    "InternalFailureError",
]
