"""Feature modules and shared abstractions."""

from . import accounts, bots, common, error_reporting, notifications, users

__all__ = [
    "accounts",
    "bots",
    "common",
    "error_reporting",
    "notifications",
    "users",
]
