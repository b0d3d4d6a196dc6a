"""JWT issuance and verification, with an optional Fernet wrapper.

Tokens are HS256 JWTs carrying the account id in ``sub``. When
``security.encrypt_tokens`` is on, the signed JWT is additionally wrapped
with Fernet before it leaves the server, which keeps compatibility with
clients of the older double-wrapped format. Decoding accepts both forms.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from cryptography.fernet import Fernet, InvalidToken
from jose import JWTError, jwt

from crudapi.core.config import Settings
from crudapi.modules.common.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


def _derive_fernet_key(secret: str) -> bytes:
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class TokenService:
    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        encrypt_tokens: bool = True,
        encryption_key: Optional[str] = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._encrypt_tokens = encrypt_tokens
        key = encryption_key.encode("utf-8") if encryption_key else _derive_fernet_key(secret_key)
        self._fernet = Fernet(key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        security = settings.security
        return cls(
            security.secret_key,
            algorithm=security.algorithm,
            expire_minutes=security.access_token_expire_minutes,
            encrypt_tokens=security.encrypt_tokens,
            encryption_key=security.encryption_key,
        )

    @property
    def encrypts_tokens(self) -> bool:
        return self._encrypt_tokens

    def create_access_token(self, account_id: Any, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self._expire_minutes))
        payload = {"sub": str(account_id), "exp": expire}
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        if self._encrypt_tokens:
            return self.encrypt(token)
        return token

    def decode_access_token(self, token: str) -> str:
        """Return the account id carried by ``token`` or raise ``InvalidTokenError``."""
        if not token:
            raise InvalidTokenError()
        try:
            inner = self.decrypt(token)
        except InvalidToken:
            inner = token
        claims = self._verify(inner)

        account_id = claims.get("sub") or claims.get("id") or (claims.get("data") or {}).get("_id")
        if not account_id:
            raise InvalidTokenError()
        return str(account_id)

    def encrypt(self, text: str) -> str:
        return self._fernet.encrypt(text.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")

    def _verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            logger.info("Rejected access token: %s", exc)
            raise InvalidTokenError() from exc


__all__ = ["TokenService"]
