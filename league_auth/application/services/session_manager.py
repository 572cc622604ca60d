from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any
from uuid import uuid4

from league_auth.application.ports.session_port import SessionPort
from league_auth.domain.entities.user import Session

from .clock import Clock, utcnow


logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60
DEFAULT_EXTEND_THRESHOLD_SECONDS = 60 * 60


class SessionManager:
    """Server-side sessions, independent of refresh tokens.

    Lookups treat a missing or expired session as ``None``. Every successful
    read bumps ``last_accessed_at``; ``touch_session`` additionally renews a
    session whose remaining validity dropped under the extension threshold.
    """

    def __init__(
        self,
        *,
        session_port: SessionPort,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        extend_threshold_seconds: int = DEFAULT_EXTEND_THRESHOLD_SECONDS,
        clock: Clock = utcnow,
    ):
        self._session_port = session_port
        self._ttl = timedelta(seconds=ttl_seconds)
        self._extend_threshold = timedelta(seconds=extend_threshold_seconds)
        self._clock = clock

    def create_session(self, *, user_id: str, data: dict[str, Any] | None = None) -> Session:
        now = self._clock()
        session = self._session_port.create_session(
            session_id=str(uuid4()),
            user_id=user_id,
            data=dict(data or {}),
            expires_at=now + self._ttl,
            created_at=now,
        )
        logger.info("session_manager: session_created session_id=%s user_id=%s", session.id, user_id)
        return session

    def get_session(self, *, session_id: str) -> Session | None:
        now = self._clock()
        session = self._session_port.get_session(session_id=session_id)
        if session is None or not session.is_active(now=now):
            return None
        self._session_port.touch_session(session_id=session.id, accessed_at=now)
        return Session(
            id=session.id,
            user_id=session.user_id,
            data=session.data,
            expires_at=session.expires_at,
            created_at=session.created_at,
            last_accessed_at=now,
        )

    def touch_session(self, *, session_id: str) -> Session | None:
        session = self.get_session(session_id=session_id)
        if session is None:
            return None
        if session.expires_at - session.last_accessed_at < self._extend_threshold:
            extended = self.extend_session(session_id=session.id)
            if extended is not None:
                return extended
        return session

    def extend_session(self, *, session_id: str) -> Session | None:
        now = self._clock()
        session = self._session_port.extend_session(
            session_id=session_id,
            expires_at=now + self._ttl,
            accessed_at=now,
        )
        if session is not None:
            logger.debug("session_manager: session_extended session_id=%s", session_id)
        return session

    def update_session(self, *, session_id: str, data: dict[str, Any]) -> Session | None:
        now = self._clock()
        session = self._session_port.get_session(session_id=session_id)
        if session is None or not session.is_active(now=now):
            return None
        merged = {**session.data, **data}
        return self._session_port.update_session_data(session_id=session.id, data=merged, accessed_at=now)

    def delete_session(self, *, session_id: str) -> None:
        self._session_port.delete_session(session_id=session_id)

    def delete_user_sessions(self, *, user_id: str) -> int:
        deleted = self._session_port.delete_user_sessions(user_id=user_id)
        logger.info("session_manager: user_sessions_deleted user_id=%s deleted=%s", user_id, deleted)
        return deleted

    def get_user_sessions(self, *, user_id: str) -> list[Session]:
        return self._session_port.list_active_user_sessions(user_id=user_id, now=self._clock())

    def cleanup_expired_sessions(self) -> int:
        deleted = self._session_port.delete_expired_sessions(now=self._clock())
        logger.info("session_manager: cleanup_expired_sessions deleted=%s", deleted)
        return deleted
