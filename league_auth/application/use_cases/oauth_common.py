from __future__ import annotations

from collections.abc import Mapping

from league_auth.application.ports.oauth_provider_port import OAuthProviderPort
from league_auth.domain.exceptions import InvalidProviderError


def resolve_provider(providers: Mapping[str, OAuthProviderPort], name: str) -> OAuthProviderPort:
    provider = providers.get(name)
    if provider is None:
        raise InvalidProviderError(f"Unknown provider '{name}'.")
    return provider


def callback_url(base_url: str, provider: str) -> str:
    return f"{base_url.rstrip('/')}/auth/callback/{provider}"
