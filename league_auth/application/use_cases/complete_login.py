from __future__ import annotations

import logging
from collections.abc import Mapping
from uuid import uuid4

from league_auth.application.dto.auth import CompleteLoginInput, LoginOutput, ProviderProfile
from league_auth.application.ports.identity_port import IdentityPort
from league_auth.application.ports.oauth_provider_port import OAuthProviderPort
from league_auth.application.ports.pending_exchange_port import PendingExchangePort
from league_auth.application.services.clock import Clock, utcnow
from league_auth.application.services.credential_issuer import CredentialIssuer
from league_auth.application.services.session_manager import SessionManager
from league_auth.domain.entities.user import User
from league_auth.domain.exceptions import (
    AuthenticationFailedError,
    DuplicateIdentityError,
    InvalidStateError,
    ProviderError,
)

from .oauth_common import callback_url, resolve_provider


logger = logging.getLogger(__name__)


class CompleteLoginUseCase:
    """Finishes a login attempt started by ``BeginLoginUseCase``.

    The pending exchange is popped before anything else, so it is gone on
    every exit path and a replayed callback always fails with
    ``InvalidStateError``. No user, token or session is written until the
    provider has returned a usable profile.
    """

    def __init__(
        self,
        *,
        providers: Mapping[str, OAuthProviderPort],
        pending_exchange_port: PendingExchangePort,
        identity_port: IdentityPort,
        credential_issuer: CredentialIssuer,
        session_manager: SessionManager,
        base_url: str,
        clock: Clock = utcnow,
    ):
        self._providers = providers
        self._pending_exchange_port = pending_exchange_port
        self._identity_port = identity_port
        self._credential_issuer = credential_issuer
        self._session_manager = session_manager
        self._base_url = base_url
        self._clock = clock

    def execute(self, command: CompleteLoginInput) -> LoginOutput:
        provider = resolve_provider(self._providers, command.provider)

        exchange = self._pending_exchange_port.pop(command.state) if command.state else None
        if exchange is None or exchange.provider != command.provider:
            logger.info("complete_login: invalid_state provider=%s", command.provider)
            raise InvalidStateError("Invalid state.")

        try:
            tokens = provider.exchange_code(
                code=command.code,
                code_verifier=exchange.code_verifier,
                redirect_uri=callback_url(self._base_url, command.provider),
            )
            logger.debug("complete_login: exchanged provider=%s", command.provider)
            profile = provider.fetch_profile(tokens=tokens)
        except ProviderError as exc:
            logger.warning(
                "complete_login: provider_failed provider=%s error=%s",
                command.provider,
                exc,
                exc_info=True,
            )
            raise AuthenticationFailedError("Authentication failed.") from exc

        user = self._resolve_user(provider=command.provider, profile=profile)
        logger.debug("complete_login: provisioned provider=%s user_id=%s", command.provider, user.id)

        issued = self._credential_issuer.generate_tokens(user_id=user.id, provider=command.provider)
        session = self._session_manager.create_session(
            user_id=user.id,
            data={
                "provider": command.provider,
                "email": profile.email,
                "name": profile.name,
                "lastLogin": self._clock().isoformat(),
            },
        )
        logger.info("complete_login: completed provider=%s user_id=%s", command.provider, user.id)
        return LoginOutput(
            user_id=user.id,
            access_token=issued.access_token,
            refresh_token=issued.refresh_token,
            expires_in=issued.expires_in,
            session_id=session.id,
        )

    def _resolve_user(self, *, provider: str, profile: ProviderProfile) -> User:
        user = self._identity_port.get_user_by_provider_subject(
            provider=provider,
            provider_subject=profile.subject,
        )
        if user is not None:
            return user

        try:
            return self._identity_port.create_user(
                user_id=str(uuid4()),
                provider=provider,
                provider_subject=profile.subject,
                email=profile.email,
                name=profile.name,
                created_at=self._clock(),
            )
        except DuplicateIdentityError:
            # Lost a concurrent first-login race; the winner's row is authoritative.
            user = self._identity_port.get_user_by_provider_subject(
                provider=provider,
                provider_subject=profile.subject,
            )
            if user is None:
                raise
            logger.info("complete_login: duplicate_identity_resolved provider=%s user_id=%s", provider, user.id)
            return user
