from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, insert, or_, select, update

from league_auth.application.ports.refresh_token_port import RefreshTokenPort
from league_auth.infrastructure.db.mappers.auth_mapper import map_row_to_refresh_token, parse_uuid
from league_auth.infrastructure.db.models.auth import RefreshTokenModel


refresh_tokens = RefreshTokenModel.__table__


class SqlRefreshTokenRepository(RefreshTokenPort):
    def __init__(self, engine):
        self._engine = engine

    def create_refresh_token(
        self,
        *,
        token_id: str,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ):
        stmt = (
            insert(refresh_tokens)
            .values(
                id=parse_uuid(token_id),
                user_id=parse_uuid(user_id),
                token_hash=token_hash,
                expires_at=expires_at,
                is_revoked=False,
                created_at=created_at,
            )
            .returning(*refresh_tokens.c)
        )
        with self._engine.begin() as conn:
            row = conn.execute(stmt).mappings().one()
        return map_row_to_refresh_token(row)

    def get_refresh_token_by_hash(self, *, token_hash: str):
        stmt = select(refresh_tokens).where(refresh_tokens.c.token_hash == token_hash).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_refresh_token(row)

    def revoke_refresh_token(self, *, token_hash: str) -> None:
        stmt = (
            update(refresh_tokens)
            .where(refresh_tokens.c.token_hash == token_hash)
            .values(is_revoked=True)
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def delete_expired_or_revoked(self, *, now: datetime) -> int:
        stmt = delete(refresh_tokens).where(
            or_(
                refresh_tokens.c.expires_at <= now,
                refresh_tokens.c.is_revoked.is_(True),
            )
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
            deleted = int(result.rowcount or 0)
        return deleted
