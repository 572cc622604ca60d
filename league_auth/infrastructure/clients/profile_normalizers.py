from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from league_auth.application.dto.auth import ProviderProfile, ProviderTokens
from league_auth.application.ports.oauth_provider_port import ProfileNormalizer, UserinfoFetcher
from league_auth.domain.exceptions import ProviderError


def _required_str(payload: Mapping[str, Any], key: str, *, provider: str) -> str:
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ProviderError(f"{provider}: profile missing '{key}'.")
    return str(value).strip()


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def profile_from_claims(claims: Mapping[str, Any], *, provider: str) -> ProviderProfile:
    email = _required_str(claims, "email", provider=provider)
    return ProviderProfile(
        subject=_required_str(claims, "sub", provider=provider),
        email=email,
        name=_optional_str(claims, "name") or email.split("@")[0],
    )


class OidcUserinfoNormalizer(ProfileNormalizer):
    """Standard OIDC userinfo response: ``sub``, ``email``, ``name``."""

    def __init__(self, *, provider: str):
        self._provider = provider

    def normalize(self, *, tokens: ProviderTokens, fetch_userinfo: UserinfoFetcher) -> ProviderProfile:
        return profile_from_claims(fetch_userinfo(tokens.access_token), provider=self._provider)


class DiscordProfileNormalizer(ProfileNormalizer):
    """Discord's ``/users/@me`` is a flat, non-OIDC user object."""

    provider = "discord"

    def normalize(self, *, tokens: ProviderTokens, fetch_userinfo: UserinfoFetcher) -> ProviderProfile:
        payload = fetch_userinfo(tokens.access_token)
        username = _required_str(payload, "username", provider=self.provider)
        return ProviderProfile(
            subject=_required_str(payload, "id", provider=self.provider),
            email=_required_str(payload, "email", provider=self.provider),
            name=_optional_str(payload, "global_name") or username,
        )
