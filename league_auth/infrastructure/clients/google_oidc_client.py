from __future__ import annotations

from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests
from google.oauth2 import id_token

from league_auth.application.dto.auth import ProviderProfile, ProviderTokens
from league_auth.application.ports.oauth_provider_port import ProfileNormalizer, UserinfoFetcher
from league_auth.domain.exceptions import ProviderError

from .profile_normalizers import OidcUserinfoNormalizer, profile_from_claims


class GoogleIdTokenNormalizer(ProfileNormalizer):
    """Reads the profile from Google's signed ``id_token``.

    Falls back to the userinfo endpoint when the token response carries no
    ``id_token``.
    """

    provider = "google"

    def __init__(self, *, client_id: str):
        self._client_id = client_id
        self._userinfo = OidcUserinfoNormalizer(provider=self.provider)

    def normalize(self, *, tokens: ProviderTokens, fetch_userinfo: UserinfoFetcher) -> ProviderProfile:
        if not tokens.id_token:
            return self._userinfo.normalize(tokens=tokens, fetch_userinfo=fetch_userinfo)

        try:
            payload = id_token_verify(token=tokens.id_token, audience=self._client_id)
        except (ValueError, GoogleAuthError) as exc:
            raise ProviderError("google: invalid id_token.") from exc

        return profile_from_claims(payload, provider=self.provider)


def id_token_verify(*, token: str, audience: str) -> dict:
    request = requests.Request()
    return id_token.verify_oauth2_token(token, request, audience)
