"""Administrative user management on top of the generic CRUD helpers."""

from .schema import USER_SCHEMA
from .service import UserAdminService

__all__ = ["USER_SCHEMA", "UserAdminService"]
