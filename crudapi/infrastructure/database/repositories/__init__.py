"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .password_reset_repository import SqlPasswordResetRepository
from .table_gateway import SqlTableGateway

__all__ = [
    "SqlAccountRepository",
    "SqlPasswordResetRepository",
    "SqlTableGateway",
]
