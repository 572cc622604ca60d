from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from league_auth.domain.exceptions import InvalidAccessTokenError
from league_auth.infrastructure.security.token_service import JwtTokenService


def _service(secret: str = "test-secret") -> JwtTokenService:
    return JwtTokenService(jwt_secret=secret, access_ttl_seconds=3600, refresh_ttl_days=30)


def test_access_token_carries_user_and_provider_claims():
    service = _service()
    now = datetime.now(timezone.utc)

    token, exp = service.create_access_token(user_id="user-1", provider="google", now=now)
    payload = service.decode_access_token(token=token)
    claims = jwt.decode(token, "test-secret", algorithms=["HS256"])

    assert payload.user_id == "user-1"
    assert payload.provider == "google"
    assert claims["type"] == "access"
    assert claims["exp"] - claims["iat"] == 3600
    assert exp == now + timedelta(hours=1)


def test_decode_rejects_token_signed_with_other_secret():
    token, _ = _service("other-secret").create_access_token(
        user_id="user-1",
        provider="google",
        now=datetime.now(timezone.utc),
    )

    with pytest.raises(InvalidAccessTokenError):
        _service().decode_access_token(token=token)


def test_decode_rejects_expired_token():
    service = _service()
    token, _ = service.create_access_token(
        user_id="user-1",
        provider="discord",
        now=datetime.now(timezone.utc) - timedelta(hours=2),
    )

    with pytest.raises(InvalidAccessTokenError):
        service.decode_access_token(token=token)


def test_decode_rejects_non_access_token_type():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": "user-1",
            "provider": "google",
            "type": "refresh",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=1)).timestamp()),
        },
        "test-secret",
        algorithm="HS256",
    )

    with pytest.raises(InvalidAccessTokenError):
        _service().decode_access_token(token=token)


def test_refresh_token_is_opaque_and_stored_as_sha256_digest():
    service = _service()

    token = service.generate_refresh_token()

    assert len(token) == 64
    assert token != service.generate_refresh_token()
    assert service.hash_refresh_token(refresh_token=token) == hashlib.sha256(token.encode()).hexdigest()


def test_refresh_token_lifetime_is_thirty_days():
    service = _service()
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    assert service.refresh_ttl_seconds == 2592000
    assert service.refresh_token_expires_at(now=now) == datetime(2026, 1, 31, tzinfo=timezone.utc)
