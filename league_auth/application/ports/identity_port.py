from __future__ import annotations

from datetime import datetime
from typing import Protocol

from league_auth.domain.entities.user import User


class IdentityPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_provider_subject(self, *, provider: str, provider_subject: str) -> User | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        provider: str,
        provider_subject: str,
        email: str,
        name: str,
        created_at: datetime,
    ) -> User:
        ...
