from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta

from league_auth.application.dto.auth import BeginLoginInput, BeginLoginOutput
from league_auth.application.ports.oauth_provider_port import OAuthProviderPort
from league_auth.application.ports.pending_exchange_port import PendingExchangePort
from league_auth.application.services.clock import Clock, utcnow
from league_auth.domain.entities.pending_exchange import PendingExchange
from league_auth.domain.services.pkce import code_challenge_s256, generate_code_verifier, generate_state

from .oauth_common import callback_url, resolve_provider


logger = logging.getLogger(__name__)


class BeginLoginUseCase:
    def __init__(
        self,
        *,
        providers: Mapping[str, OAuthProviderPort],
        pending_exchange_port: PendingExchangePort,
        base_url: str,
        state_ttl_seconds: int,
        clock: Clock = utcnow,
    ):
        self._providers = providers
        self._pending_exchange_port = pending_exchange_port
        self._base_url = base_url
        self._state_ttl = timedelta(seconds=state_ttl_seconds)
        self._clock = clock

    def execute(self, command: BeginLoginInput) -> BeginLoginOutput:
        provider = resolve_provider(self._providers, command.provider)

        code_verifier = generate_code_verifier()
        state = generate_state()
        redirect_url = provider.build_authorization_url(
            state=state,
            code_challenge=code_challenge_s256(code_verifier),
            redirect_uri=callback_url(self._base_url, command.provider),
        )

        now = self._clock()
        self._pending_exchange_port.put(
            PendingExchange(
                state=state,
                code_verifier=code_verifier,
                provider=command.provider,
                created_at=now,
                expires_at=now + self._state_ttl,
            )
        )
        logger.info("begin_login: started provider=%s", command.provider)
        return BeginLoginOutput(redirect_url=redirect_url, state=state)
