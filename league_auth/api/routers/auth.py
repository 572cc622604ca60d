from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from league_auth.api.deps import (
    get_begin_login_use_case,
    get_complete_login_use_case,
    get_credential_issuer,
    get_current_session,
    get_current_user,
    get_session_manager,
)
from league_auth.api.schemas.auth import (
    AccessTokenResponse,
    LoginResponse,
    MessageResponse,
    RefreshTokenRequest,
    SessionResponse,
    UserResponse,
)
from league_auth.application.dto.auth import BeginLoginInput, CompleteLoginInput
from league_auth.application.services.credential_issuer import CredentialIssuer
from league_auth.application.services.session_manager import SessionManager
from league_auth.application.use_cases.begin_login import BeginLoginUseCase
from league_auth.application.use_cases.complete_login import CompleteLoginUseCase
from league_auth.domain.entities.user import Session, User
from league_auth.domain.exceptions import (
    AuthenticationFailedError,
    DuplicateIdentityError,
    InvalidProviderError,
    InvalidRefreshTokenError,
    InvalidStateError,
    ProviderError,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        user_id=session.user_id,
        data=session.data,
        expires_at=session.expires_at,
        created_at=session.created_at,
        last_accessed_at=session.last_accessed_at,
    )


def _require_refresh_token(req: RefreshTokenRequest | None) -> str:
    token = (req.refresh_token if req is not None else None) or ""
    if not token.strip():
        raise HTTPException(status_code=400, detail="Refresh token is required")
    return token


@router.get("/login/{provider}")
def begin_login(
    provider: str,
    use_case: BeginLoginUseCase = Depends(get_begin_login_use_case),
):
    try:
        output = use_case.execute(BeginLoginInput(provider=provider))
    except InvalidProviderError as exc:
        raise HTTPException(status_code=400, detail="Invalid provider") from exc
    except ProviderError as exc:
        logger.warning("auth_router: login_redirect_failed provider=%s error=%s", provider, exc)
        raise HTTPException(status_code=500, detail="Authentication failed") from exc

    return RedirectResponse(url=output.redirect_url, status_code=302)


@router.get("/callback/{provider}", response_model=LoginResponse)
def complete_login(
    provider: str,
    state: str | None = None,
    code: str | None = None,
    use_case: CompleteLoginUseCase = Depends(get_complete_login_use_case),
):
    try:
        output = use_case.execute(CompleteLoginInput(provider=provider, state=state or "", code=code or ""))
    except InvalidProviderError as exc:
        raise HTTPException(status_code=400, detail="Invalid provider") from exc
    except InvalidStateError as exc:
        raise HTTPException(status_code=400, detail="Invalid state") from exc
    except AuthenticationFailedError as exc:
        raise HTTPException(status_code=500, detail="Authentication failed") from exc
    except (SQLAlchemyError, DuplicateIdentityError) as exc:
        logger.exception("auth_router: callback_storage_failed provider=%s", provider)
        raise HTTPException(status_code=500, detail="Authentication failed") from exc

    return LoginResponse(
        access_token=output.access_token,
        refresh_token=output.refresh_token,
        expires_in=output.expires_in,
        session_id=output.session_id,
    )


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh_access_token(
    req: RefreshTokenRequest | None = Body(default=None),
    credential_issuer: CredentialIssuer = Depends(get_credential_issuer),
):
    token = _require_refresh_token(req)
    try:
        output = credential_issuer.refresh_access_token(refresh_token=token)
    except InvalidRefreshTokenError as exc:
        raise HTTPException(status_code=401, detail="Invalid refresh token") from exc

    return AccessTokenResponse(access_token=output.access_token, expires_in=output.expires_in)


@router.post("/revoke", response_model=MessageResponse)
def revoke_refresh_token(
    req: RefreshTokenRequest | None = Body(default=None),
    credential_issuer: CredentialIssuer = Depends(get_credential_issuer),
):
    token = _require_refresh_token(req)
    try:
        credential_issuer.revoke_refresh_token(refresh_token=token)
    except SQLAlchemyError as exc:
        logger.exception("auth_router: revoke_failed")
        raise HTTPException(status_code=500, detail="Failed to revoke token") from exc

    return MessageResponse(message="Token revoked successfully")


@router.get("/session", response_model=SessionResponse)
def get_session(session: Session = Depends(get_current_session)):
    return _session_response(session)


@router.delete("/session", response_model=MessageResponse)
def delete_session(
    session: Session = Depends(get_current_session),
    session_manager: SessionManager = Depends(get_session_manager),
):
    session_manager.delete_session(session_id=session.id)
    return MessageResponse(message="Session terminated")


@router.get("/sessions", response_model=list[SessionResponse])
def list_sessions(
    session: Session = Depends(get_current_session),
    session_manager: SessionManager = Depends(get_session_manager),
):
    return [_session_response(item) for item in session_manager.get_user_sessions(user_id=session.user_id)]


@router.delete("/sessions", response_model=MessageResponse)
def delete_user_sessions(
    session: Session = Depends(get_current_session),
    session_manager: SessionManager = Depends(get_session_manager),
):
    session_manager.delete_user_sessions(user_id=session.user_id)
    return MessageResponse(message="All sessions terminated")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse(
        id=current_user.id,
        provider=current_user.provider,
        email=current_user.email,
        name=current_user.name,
        created_at=current_user.created_at,
    )
