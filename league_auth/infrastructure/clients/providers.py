from __future__ import annotations

import httpx

from league_auth.application.ports.oauth_provider_port import OAuthProviderPort
from league_auth.shared.config import Settings

from .google_oidc_client import GoogleIdTokenNormalizer
from .oauth_client import HttpxOAuthClient, OAuthProviderSettings
from .profile_normalizers import DiscordProfileNormalizer


GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"
DISCORD_AUTHORIZATION_ENDPOINT = "https://discord.com/oauth2/authorize"
DISCORD_TOKEN_ENDPOINT = "https://discord.com/api/oauth2/token"
DISCORD_USERINFO_ENDPOINT = "https://discord.com/api/users/@me"


def google_provider_settings(*, client_id: str, client_secret: str) -> OAuthProviderSettings:
    return OAuthProviderSettings(
        name="google",
        client_id=client_id,
        client_secret=client_secret,
        scope="openid email profile",
        discovery_url=GOOGLE_DISCOVERY_URL,
    )


def discord_provider_settings(*, client_id: str, client_secret: str) -> OAuthProviderSettings:
    return OAuthProviderSettings(
        name="discord",
        client_id=client_id,
        client_secret=client_secret,
        scope="identify email",
        authorization_endpoint=DISCORD_AUTHORIZATION_ENDPOINT,
        token_endpoint=DISCORD_TOKEN_ENDPOINT,
        userinfo_endpoint=DISCORD_USERINFO_ENDPOINT,
    )


def build_oauth_providers(
    settings: Settings,
    *,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, OAuthProviderPort]:
    """Providers with both client id and secret configured, keyed by path name."""
    providers: dict[str, OAuthProviderPort] = {}
    if settings.google_client_id and settings.google_client_secret:
        providers["google"] = HttpxOAuthClient(
            settings=google_provider_settings(
                client_id=settings.google_client_id,
                client_secret=settings.google_client_secret,
            ),
            normalizer=GoogleIdTokenNormalizer(client_id=settings.google_client_id),
            timeout_seconds=settings.oauth_http_timeout_seconds,
            transport=transport,
        )
    if settings.discord_client_id and settings.discord_client_secret:
        providers["discord"] = HttpxOAuthClient(
            settings=discord_provider_settings(
                client_id=settings.discord_client_id,
                client_secret=settings.discord_client_secret,
            ),
            normalizer=DiscordProfileNormalizer(),
            timeout_seconds=settings.oauth_http_timeout_seconds,
            transport=transport,
        )
    return providers
