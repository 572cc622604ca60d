from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from league_auth.domain.entities.user import Session


class SessionPort(Protocol):
    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        data: dict[str, Any],
        expires_at: datetime,
        created_at: datetime,
    ) -> Session:
        ...

    def get_session(self, *, session_id: str) -> Session | None:
        ...

    def touch_session(self, *, session_id: str, accessed_at: datetime) -> None:
        ...

    def extend_session(self, *, session_id: str, expires_at: datetime, accessed_at: datetime) -> Session | None:
        ...

    def update_session_data(self, *, session_id: str, data: dict[str, Any], accessed_at: datetime) -> Session | None:
        ...

    def delete_session(self, *, session_id: str) -> None:
        ...

    def delete_user_sessions(self, *, user_id: str) -> int:
        ...

    def list_active_user_sessions(self, *, user_id: str, now: datetime) -> list[Session]:
        ...

    def delete_expired_sessions(self, *, now: datetime) -> int:
        ...
