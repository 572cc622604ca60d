from __future__ import annotations

import logging
from uuid import uuid4

from league_auth.application.dto.auth import AccessTokenPayload, IssuedTokens, RefreshedAccessToken
from league_auth.application.ports.identity_port import IdentityPort
from league_auth.application.ports.refresh_token_port import RefreshTokenPort
from league_auth.application.ports.token_port import TokenPort
from league_auth.domain.exceptions import InvalidRefreshTokenError

from .clock import Clock, utcnow


logger = logging.getLogger(__name__)


class CredentialIssuer:
    """Mints access tokens and owns the refresh-token lifecycle."""

    def __init__(
        self,
        *,
        identity_port: IdentityPort,
        refresh_token_port: RefreshTokenPort,
        token_port: TokenPort,
        clock: Clock = utcnow,
    ):
        self._identity_port = identity_port
        self._refresh_token_port = refresh_token_port
        self._token_port = token_port
        self._clock = clock

    def generate_tokens(self, *, user_id: str, provider: str) -> IssuedTokens:
        now = self._clock()
        access_token, _ = self._token_port.create_access_token(user_id=user_id, provider=provider, now=now)
        refresh_token = self._token_port.generate_refresh_token()
        self._refresh_token_port.create_refresh_token(
            token_id=str(uuid4()),
            user_id=user_id,
            token_hash=self._token_port.hash_refresh_token(refresh_token=refresh_token),
            expires_at=self._token_port.refresh_token_expires_at(now=now),
            created_at=now,
        )
        logger.info("credential_issuer: tokens_issued user_id=%s provider=%s", user_id, provider)
        return IssuedTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._token_port.refresh_ttl_seconds,
        )

    def refresh_access_token(self, *, refresh_token: str) -> RefreshedAccessToken:
        token = refresh_token.strip()
        if not token:
            raise InvalidRefreshTokenError("Missing refresh token.")

        now = self._clock()
        record = self._refresh_token_port.get_refresh_token_by_hash(
            token_hash=self._token_port.hash_refresh_token(refresh_token=token),
        )
        if record is None:
            raise InvalidRefreshTokenError("Invalid refresh token.")
        if not record.is_usable(now=now):
            logger.info(
                "credential_issuer: refresh_rejected token_id=%s revoked=%s expired=%s",
                record.id,
                record.is_revoked,
                record.expires_at <= now,
            )
            raise InvalidRefreshTokenError("Invalid refresh token.")

        user = self._identity_port.get_user_by_id(user_id=record.user_id)
        if user is None:
            raise InvalidRefreshTokenError("Invalid refresh token.")

        access_token, _ = self._token_port.create_access_token(user_id=user.id, provider=user.provider, now=now)
        return RefreshedAccessToken(access_token=access_token, expires_in=self._token_port.access_ttl_seconds)

    def revoke_refresh_token(self, *, refresh_token: str) -> None:
        token = refresh_token.strip()
        if not token:
            return
        self._refresh_token_port.revoke_refresh_token(
            token_hash=self._token_port.hash_refresh_token(refresh_token=token),
        )

    def cleanup_expired_tokens(self) -> int:
        deleted = self._refresh_token_port.delete_expired_or_revoked(now=self._clock())
        logger.info("credential_issuer: cleanup_expired_tokens deleted=%s", deleted)
        return deleted

    def decode_access_token(self, *, access_token: str) -> AccessTokenPayload:
        return self._token_port.decode_access_token(token=access_token)
