"""Reusable FastAPI dependencies."""

from .auth import get_bearer_token, get_current_account, get_request_context, require_roles
from .database import get_container, get_db_session
from .services import (
    get_account_repository,
    get_account_service,
    get_auth_service,
    get_bot_service,
    get_user_admin_service,
)

__all__ = [
    "get_account_repository",
    "get_account_service",
    "get_auth_service",
    "get_bearer_token",
    "get_bot_service",
    "get_container",
    "get_current_account",
    "get_db_session",
    "get_request_context",
    "get_user_admin_service",
    "require_roles",
]
