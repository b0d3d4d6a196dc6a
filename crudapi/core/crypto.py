"""Password hashing backed by bcrypt."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """One-way password hashing; plaintext is never stored or recoverable."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed or empty stored hash.
            return False


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash plain text password using bcrypt."""
    return PasswordHasher(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a stored bcrypt hash."""
    return PasswordHasher().verify(plain_password, hashed_password)


__all__ = ["PasswordHasher", "hash_password", "verify_password"]
