"""In-memory persistence backend, used by tests and local experiments."""

from .accounts import InMemoryAccountRepository, InMemoryPasswordResetRepository
from .store import InMemorySession, InMemoryStore
from .table_gateway import InMemoryTableGateway

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryPasswordResetRepository",
    "InMemorySession",
    "InMemoryStore",
    "InMemoryTableGateway",
]
