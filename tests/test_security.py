"""Tests for token issuance/verification and password hashing."""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from crudapi.core.config import Settings, SecuritySettings
from crudapi.core.crypto import PasswordHasher
from crudapi.core.security import TokenService
from crudapi.modules.common import UnauthorizedError
from crudapi.modules.common.exceptions import InvalidTokenError

TEST_SECRET = "test-secret-key"


def _legacy_token(claims: dict) -> str:
    claims = {**claims, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    return jwt.encode(claims, TEST_SECRET, algorithm="HS256")


def test_wrapped_token_round_trip(tokens):
    token = tokens.create_access_token(42)

    # A wrapped token is not itself a JWT.
    assert token.count(".") != 2
    assert tokens.decode_access_token(token) == "42"


def test_plain_token_round_trip():
    service = TokenService(TEST_SECRET, encrypt_tokens=False)

    token = service.create_access_token(7)

    assert jwt.get_unverified_claims(token)["sub"] == "7"
    assert service.decode_access_token(token) == "7"


def test_wrapping_service_accepts_plain_tokens(tokens):
    plain = TokenService(TEST_SECRET, encrypt_tokens=False).create_access_token(9)

    assert tokens.decode_access_token(plain) == "9"


@pytest.mark.parametrize(
    "claims",
    [{"id": "11"}, {"data": {"_id": "11"}}],
)
def test_legacy_claim_layouts(tokens, claims):
    assert tokens.decode_access_token(_legacy_token(claims)) == "11"


def test_expired_token_is_rejected(tokens):
    token = tokens.create_access_token(1, expires_delta=timedelta(seconds=-5))

    with pytest.raises(InvalidTokenError) as excinfo:
        tokens.decode_access_token(token)

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "INVALID_TOKEN"


def test_token_signed_with_another_secret_is_rejected(tokens):
    foreign = TokenService("another-secret", encrypt_tokens=False).create_access_token(1)

    with pytest.raises(UnauthorizedError):
        tokens.decode_access_token(foreign)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_are_rejected(tokens, token):
    with pytest.raises(InvalidTokenError):
        tokens.decode_access_token(token)


def test_token_without_subject_is_rejected(tokens):
    with pytest.raises(InvalidTokenError):
        tokens.decode_access_token(_legacy_token({"role": "admin"}))


def test_explicit_encryption_key():
    key = "x" * 43 + "="
    service = TokenService(TEST_SECRET, encryption_key=key)

    token = service.create_access_token(3)

    assert service.decrypt(token).count(".") == 2
    assert TokenService(TEST_SECRET).decode_access_token(service.decrypt(token)) == "3"


def test_from_settings_uses_security_section():
    settings = Settings(
        security=SecuritySettings(secret_key=TEST_SECRET, encrypt_tokens=False, access_token_expire_minutes=5)
    )
    service = TokenService.from_settings(settings)

    token = service.create_access_token(5)

    claims = jwt.get_unverified_claims(token)
    assert claims["sub"] == "5"
    assert service.encrypts_tokens is False


def test_password_hasher(hasher):
    hashed = hasher.hash("s3cret")

    assert hashed != "s3cret"
    assert hasher.verify("s3cret", hashed)
    assert not hasher.verify("other", hashed)


def test_password_hasher_handles_malformed_hash():
    assert PasswordHasher(rounds=4).verify("anything", "not-a-bcrypt-hash") is False
