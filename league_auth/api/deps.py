from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from league_auth.application.ports.oauth_provider_port import OAuthProviderPort
from league_auth.application.services.credential_issuer import CredentialIssuer
from league_auth.application.services.session_manager import SessionManager
from league_auth.application.use_cases.begin_login import BeginLoginUseCase
from league_auth.application.use_cases.complete_login import CompleteLoginUseCase
from league_auth.core.db import get_engine
from league_auth.domain.entities.user import Session, User
from league_auth.domain.exceptions import InvalidAccessTokenError
from league_auth.infrastructure.clients.providers import build_oauth_providers
from league_auth.infrastructure.db.repositories.identity_repository import SqlIdentityRepository
from league_auth.infrastructure.db.repositories.refresh_token_repository import SqlRefreshTokenRepository
from league_auth.infrastructure.db.repositories.session_repository import SqlSessionRepository
from league_auth.infrastructure.security.token_service import JwtTokenService
from league_auth.infrastructure.state.pending_exchange_registry import InMemoryPendingExchangeRegistry
from league_auth.shared.config import get_settings


SESSION_HEADER = "x-session-id"


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(
        jwt_secret=settings.jwt_secret,
        access_ttl_seconds=settings.access_token_ttl_seconds,
        refresh_ttl_days=settings.refresh_token_ttl_days,
    )


@lru_cache(maxsize=1)
def _get_oauth_providers() -> dict[str, OAuthProviderPort]:
    return build_oauth_providers(get_settings())


@lru_cache(maxsize=1)
def get_pending_exchange_registry() -> InMemoryPendingExchangeRegistry:
    return InMemoryPendingExchangeRegistry()


def get_credential_issuer() -> CredentialIssuer:
    engine = _get_db_engine()
    return CredentialIssuer(
        identity_port=SqlIdentityRepository(engine),
        refresh_token_port=SqlRefreshTokenRepository(engine),
        token_port=_get_token_service(),
    )


def get_session_manager() -> SessionManager:
    settings = get_settings()
    return SessionManager(
        session_port=SqlSessionRepository(_get_db_engine()),
        ttl_seconds=settings.session_ttl_seconds,
        extend_threshold_seconds=settings.session_extend_threshold_seconds,
    )


def get_identity_repository() -> SqlIdentityRepository:
    return SqlIdentityRepository(_get_db_engine())


def get_begin_login_use_case() -> BeginLoginUseCase:
    settings = get_settings()
    return BeginLoginUseCase(
        providers=_get_oauth_providers(),
        pending_exchange_port=get_pending_exchange_registry(),
        base_url=settings.base_url,
        state_ttl_seconds=settings.oauth_state_ttl_seconds,
    )


def get_complete_login_use_case() -> CompleteLoginUseCase:
    settings = get_settings()
    return CompleteLoginUseCase(
        providers=_get_oauth_providers(),
        pending_exchange_port=get_pending_exchange_registry(),
        identity_port=get_identity_repository(),
        credential_issuer=get_credential_issuer(),
        session_manager=get_session_manager(),
        base_url=settings.base_url,
    )


def get_current_session(
    x_session_id: str | None = Header(default=None, alias=SESSION_HEADER),
    session_manager: SessionManager = Depends(get_session_manager),
) -> Session:
    session_id = (x_session_id or "").strip()
    if not session_id:
        raise HTTPException(status_code=401, detail="No active session")
    session = session_manager.touch_session(session_id=session_id)
    if session is None:
        raise HTTPException(status_code=401, detail="No active session")
    return session


def get_current_user(
    authorization: str | None = Header(default=None),
    credential_issuer: CredentialIssuer = Depends(get_credential_issuer),
    identity_repository: SqlIdentityRepository = Depends(get_identity_repository),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid access token")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Invalid access token")

    try:
        payload = credential_issuer.decode_access_token(access_token=token)
    except InvalidAccessTokenError as exc:
        raise HTTPException(status_code=401, detail="Invalid access token") from exc

    user = identity_repository.get_user_by_id(user_id=payload.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid access token")
    return user
