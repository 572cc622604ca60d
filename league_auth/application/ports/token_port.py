from __future__ import annotations

from datetime import datetime
from typing import Protocol

from league_auth.application.dto.auth import AccessTokenPayload


class TokenPort(Protocol):
    access_ttl_seconds: int
    refresh_ttl_seconds: int

    def create_access_token(self, *, user_id: str, provider: str, now: datetime) -> tuple[str, datetime]:
        ...

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        ...

    def generate_refresh_token(self) -> str:
        ...

    def hash_refresh_token(self, *, refresh_token: str) -> str:
        ...

    def refresh_token_expires_at(self, *, now: datetime) -> datetime:
        ...
