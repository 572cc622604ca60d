"""
Maintenance entry point.

Commands:
- create-schema: creates the users, refresh_tokens and sessions tables.
- cleanup: deletes expired/revoked refresh tokens and expired sessions.

Run periodically (cron, scheduled task) with ``python -m league_auth.maintenance cleanup``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from league_auth.application.services.credential_issuer import CredentialIssuer
from league_auth.application.services.session_manager import SessionManager
from league_auth.core.db import create_schema, get_engine
from league_auth.infrastructure.db.repositories.identity_repository import SqlIdentityRepository
from league_auth.infrastructure.db.repositories.refresh_token_repository import SqlRefreshTokenRepository
from league_auth.infrastructure.db.repositories.session_repository import SqlSessionRepository
from league_auth.infrastructure.security.token_service import JwtTokenService
from league_auth.shared.config import Settings, get_settings


logger = logging.getLogger(__name__)


def run_cleanup(engine, settings: Settings) -> tuple[int, int]:
    credential_issuer = CredentialIssuer(
        identity_port=SqlIdentityRepository(engine),
        refresh_token_port=SqlRefreshTokenRepository(engine),
        token_port=JwtTokenService(
            jwt_secret=settings.jwt_secret,
            access_ttl_seconds=settings.access_token_ttl_seconds,
            refresh_ttl_days=settings.refresh_token_ttl_days,
        ),
    )
    session_manager = SessionManager(
        session_port=SqlSessionRepository(engine),
        ttl_seconds=settings.session_ttl_seconds,
        extend_threshold_seconds=settings.session_extend_threshold_seconds,
    )
    return credential_issuer.cleanup_expired_tokens(), session_manager.cleanup_expired_sessions()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="League auth maintenance tasks.")
    parser.add_argument("command", choices=["create-schema", "cleanup"])
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    if not settings.postgres_dsn:
        logger.error("maintenance: POSTGRES_DSN is required")
        return 2

    engine = get_engine(settings.postgres_dsn)
    if args.command == "create-schema":
        create_schema(engine)
        return 0

    if not settings.jwt_secret:
        logger.error("maintenance: JWT_SECRET is required")
        return 2

    tokens_deleted, sessions_deleted = run_cleanup(engine, settings)
    logger.info("maintenance: cleanup_done tokens_deleted=%s sessions_deleted=%s", tokens_deleted, sessions_deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
