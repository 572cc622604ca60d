from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta

import jwt

from league_auth.application.dto.auth import AccessTokenPayload
from league_auth.application.ports.token_port import TokenPort
from league_auth.domain.exceptions import InvalidAccessTokenError


JWT_ALGORITHM = "HS256"


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        jwt_secret: str,
        access_ttl_seconds: int,
        refresh_ttl_days: int,
    ):
        self._jwt_secret = jwt_secret
        self.access_ttl_seconds = access_ttl_seconds
        self.refresh_ttl_seconds = refresh_ttl_days * 24 * 60 * 60

    def create_access_token(self, *, user_id: str, provider: str, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(seconds=self.access_ttl_seconds)
        payload = {
            "sub": user_id,
            "provider": provider,
            "type": "access",
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._jwt_secret, algorithm=JWT_ALGORITHM)
        return token, exp

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        try:
            payload = jwt.decode(token, self._jwt_secret, algorithms=[JWT_ALGORITHM])
        except jwt.PyJWTError as exc:
            raise InvalidAccessTokenError("Invalid access token.") from exc

        if payload.get("type") != "access":
            raise InvalidAccessTokenError("Invalid token type.")

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidAccessTokenError("Invalid token subject.")

        provider = payload.get("provider")
        if not provider or not isinstance(provider, str):
            raise InvalidAccessTokenError("Invalid token provider.")

        return AccessTokenPayload(user_id=user_id, provider=provider)

    def generate_refresh_token(self) -> str:
        return secrets.token_urlsafe(48)

    def hash_refresh_token(self, *, refresh_token: str) -> str:
        return hashlib.sha256(refresh_token.encode("utf-8")).hexdigest()

    def refresh_token_expires_at(self, *, now: datetime) -> datetime:
        return now + timedelta(seconds=self.refresh_ttl_seconds)
