from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import UUID

from league_auth.domain.entities.user import RefreshToken, Session, User


def _as_str(value: Any) -> str:
    return str(value)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(str(value))
    except ValueError:
        return None


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        provider=row["provider"],
        provider_subject=row["provider_id"],
        email=row["email"],
        name=row["name"],
        created_at=as_utc(row["created_at"]),
    )


def map_row_to_refresh_token(row: Mapping[str, Any]) -> RefreshToken:
    return RefreshToken(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        token_hash=row["token_hash"],
        expires_at=as_utc(row["expires_at"]),
        is_revoked=bool(row["is_revoked"]),
        created_at=as_utc(row["created_at"]),
    )


def map_row_to_session(row: Mapping[str, Any]) -> Session:
    return Session(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        data=dict(row["data"] or {}),
        expires_at=as_utc(row["expires_at"]),
        created_at=as_utc(row["created_at"]),
        last_accessed_at=as_utc(row["last_accessed_at"]),
    )
