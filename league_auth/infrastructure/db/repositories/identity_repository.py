from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from league_auth.application.ports.identity_port import IdentityPort
from league_auth.domain.exceptions import DuplicateIdentityError
from league_auth.infrastructure.db.mappers.auth_mapper import map_row_to_user, parse_uuid
from league_auth.infrastructure.db.models.auth import UserModel


logger = logging.getLogger(__name__)

users = UserModel.__table__


class SqlIdentityRepository(IdentityPort):
    def __init__(self, engine):
        self._engine = engine

    def get_user_by_id(self, *, user_id: str):
        user_uuid = parse_uuid(user_id)
        if user_uuid is None:
            return None
        stmt = select(users).where(users.c.id == user_uuid).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_provider_subject(self, *, provider: str, provider_subject: str):
        stmt = (
            select(users)
            .where(users.c.provider == provider)
            .where(users.c.provider_id == provider_subject)
            .limit(1)
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def create_user(
        self,
        *,
        user_id: str,
        provider: str,
        provider_subject: str,
        email: str,
        name: str,
        created_at: datetime,
    ):
        stmt = (
            insert(users)
            .values(
                id=parse_uuid(user_id),
                provider=provider,
                provider_id=provider_subject,
                email=email,
                name=name,
                created_at=created_at,
            )
            .returning(*users.c)
        )
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().one()
        except IntegrityError as exc:
            logger.info(
                "identity_repository: duplicate_identity provider=%s provider_subject=%s",
                provider,
                provider_subject,
            )
            raise DuplicateIdentityError(f"User already exists for provider '{provider}'.") from exc
        return map_row_to_user(row)
