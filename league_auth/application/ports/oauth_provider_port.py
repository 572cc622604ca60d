from __future__ import annotations

from typing import Any, Callable, Protocol

from league_auth.application.dto.auth import ProviderProfile, ProviderTokens


UserinfoFetcher = Callable[[str], dict[str, Any]]


class OAuthProviderPort(Protocol):
    name: str

    def build_authorization_url(self, *, state: str, code_challenge: str, redirect_uri: str) -> str:
        ...

    def exchange_code(self, *, code: str, code_verifier: str, redirect_uri: str) -> ProviderTokens:
        ...

    def fetch_profile(self, *, tokens: ProviderTokens) -> ProviderProfile:
        ...


class ProfileNormalizer(Protocol):
    def normalize(self, *, tokens: ProviderTokens, fetch_userinfo: UserinfoFetcher) -> ProviderProfile:
        ...
