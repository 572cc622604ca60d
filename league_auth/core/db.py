from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


@lru_cache(maxsize=4)
def get_engine(dsn: str) -> Engine:
    return create_engine(dsn, future=True, pool_pre_ping=True)


def create_schema(engine: Engine) -> list[str]:
    """Create the users, refresh_tokens and sessions tables if missing."""
    # Models register themselves on Base.metadata when imported.
    from league_auth.infrastructure.db.models import auth  # noqa: F401

    Base.metadata.create_all(bind=engine)
    tables = sorted(Base.metadata.tables)
    logger.info("db: schema_ready tables=%s", ",".join(tables))
    return tables
