from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, insert, select, update

from league_auth.application.ports.session_port import SessionPort
from league_auth.infrastructure.db.mappers.auth_mapper import map_row_to_session, parse_uuid
from league_auth.infrastructure.db.models.auth import SessionModel


sessions = SessionModel.__table__


class SqlSessionRepository(SessionPort):
    def __init__(self, engine):
        self._engine = engine

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        data: dict[str, Any],
        expires_at: datetime,
        created_at: datetime,
    ):
        stmt = (
            insert(sessions)
            .values(
                id=parse_uuid(session_id),
                user_id=parse_uuid(user_id),
                data=data,
                expires_at=expires_at,
                created_at=created_at,
                last_accessed_at=created_at,
            )
            .returning(*sessions.c)
        )
        with self._engine.begin() as conn:
            row = conn.execute(stmt).mappings().one()
        return map_row_to_session(row)

    def get_session(self, *, session_id: str):
        session_uuid = parse_uuid(session_id)
        if session_uuid is None:
            return None
        stmt = select(sessions).where(sessions.c.id == session_uuid).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_session(row)

    def touch_session(self, *, session_id: str, accessed_at: datetime) -> None:
        session_uuid = parse_uuid(session_id)
        if session_uuid is None:
            return
        stmt = update(sessions).where(sessions.c.id == session_uuid).values(last_accessed_at=accessed_at)
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def extend_session(self, *, session_id: str, expires_at: datetime, accessed_at: datetime):
        session_uuid = parse_uuid(session_id)
        if session_uuid is None:
            return None
        stmt = (
            update(sessions)
            .where(sessions.c.id == session_uuid)
            .values(expires_at=expires_at, last_accessed_at=accessed_at)
            .returning(*sessions.c)
        )
        with self._engine.begin() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_session(row)

    def update_session_data(self, *, session_id: str, data: dict[str, Any], accessed_at: datetime):
        session_uuid = parse_uuid(session_id)
        if session_uuid is None:
            return None
        stmt = (
            update(sessions)
            .where(sessions.c.id == session_uuid)
            .values(data=data, last_accessed_at=accessed_at)
            .returning(*sessions.c)
        )
        with self._engine.begin() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_session(row)

    def delete_session(self, *, session_id: str) -> None:
        session_uuid = parse_uuid(session_id)
        if session_uuid is None:
            return
        with self._engine.begin() as conn:
            conn.execute(delete(sessions).where(sessions.c.id == session_uuid))

    def delete_user_sessions(self, *, user_id: str) -> int:
        user_uuid = parse_uuid(user_id)
        if user_uuid is None:
            return 0
        with self._engine.begin() as conn:
            result = conn.execute(delete(sessions).where(sessions.c.user_id == user_uuid))
            deleted = int(result.rowcount or 0)
        return deleted

    def list_active_user_sessions(self, *, user_id: str, now: datetime):
        user_uuid = parse_uuid(user_id)
        if user_uuid is None:
            return []
        stmt = (
            select(sessions)
            .where(sessions.c.user_id == user_uuid)
            .where(sessions.c.expires_at > now)
            .order_by(sessions.c.created_at.desc())
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [map_row_to_session(row) for row in rows]

    def delete_expired_sessions(self, *, now: datetime) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(delete(sessions).where(sessions.c.expires_at <= now))
            deleted = int(result.rowcount or 0)
        return deleted
