"""Account domain specific exceptions."""

from crudapi.modules.common.exceptions import (
    AppError,
    BlockedError,
    ConflictError,
    IncorrectCredentialError,
    NotFoundError,
    ValidationFailedError,
)


class AccountError(AppError):
    """Base class for account domain errors."""


class AccountAlreadyExistsError(ConflictError, AccountError):
    """Raised when attempting to register an e-mail that is already taken."""

    default_message = "EMAIL_ALREADY_EXISTS"


class AccountNotFoundError(NotFoundError, AccountError):
    """Raised when the requested account cannot be found."""

    default_message = "USER_DOES_NOT_EXIST"


class AccountBlockedError(BlockedError, AccountError):
    """Raised while an account is locked out after too many failed logins."""


class IncorrectPasswordError(IncorrectCredentialError, AccountError):
    """Raised when the password does not match the stored hash."""


class MalformedIdError(ValidationFailedError, AccountError):
    default_message = "ID_MALFORMED"
