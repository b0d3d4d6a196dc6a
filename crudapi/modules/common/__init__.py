"""Shared abstractions used across modules."""

from .crud import CrudService
from .exceptions import (
    AppError,
    BlockedError,
    ConflictError,
    IncorrectCredentialError,
    InternalFailureError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from .gateway import Record, SortSpec, TableGateway
from .listing import PaginatedResult, list_items_paginated
from .schema import ColumnSpec, EntitySchema, column
from .uniqueness import assert_unique

__all__ = [
    "AppError",
    "BlockedError",
    "ColumnSpec",
    "ConflictError",
    "CrudService",
    "EntitySchema",
    "IncorrectCredentialError",
    "InternalFailureError",
    "NotFoundError",
    "PaginatedResult",
    "Record",
    "SortSpec",
    "TableGateway",
    "UnauthorizedError",
    "ValidationFailedError",
    "assert_unique",
    "column",
    "list_items_paginated",
]
