from __future__ import annotations

from datetime import datetime
from typing import Protocol

from league_auth.domain.entities.user import RefreshToken


class RefreshTokenPort(Protocol):
    def create_refresh_token(
        self,
        *,
        token_id: str,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> RefreshToken:
        ...

    def get_refresh_token_by_hash(self, *, token_hash: str) -> RefreshToken | None:
        ...

    def revoke_refresh_token(self, *, token_hash: str) -> None:
        ...

    def delete_expired_or_revoked(self, *, now: datetime) -> int:
        ...
