from __future__ import annotations

from dataclasses import dataclass, field
import logging
from threading import Lock
from typing import Any
from urllib.parse import urlencode

import httpx

from league_auth.application.dto.auth import ProviderProfile, ProviderTokens
from league_auth.application.ports.oauth_provider_port import OAuthProviderPort, ProfileNormalizer
from league_auth.domain.exceptions import ProviderError
from league_auth.domain.services.pkce import CODE_CHALLENGE_METHOD


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuthProviderSettings:
    name: str
    client_id: str
    client_secret: str
    scope: str
    discovery_url: str | None = None
    authorization_endpoint: str | None = None
    token_endpoint: str | None = None
    userinfo_endpoint: str | None = None
    extra_authorization_params: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderEndpoints:
    authorization_endpoint: str
    token_endpoint: str
    userinfo_endpoint: str | None


class HttpxOAuthClient(OAuthProviderPort):
    """Authorization Code + PKCE client for one identity provider.

    Endpoints come from OIDC discovery when ``discovery_url`` is set (fetched
    once and cached), otherwise from the static settings.
    """

    def __init__(
        self,
        *,
        settings: OAuthProviderSettings,
        normalizer: ProfileNormalizer,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ):
        self.name = settings.name
        self._settings = settings
        self._normalizer = normalizer
        self._timeout = timeout_seconds
        self._transport = transport
        self._endpoints: ProviderEndpoints | None = None
        self._lock = Lock()

    def build_authorization_url(self, *, state: str, code_challenge: str, redirect_uri: str) -> str:
        endpoints = self._resolve_endpoints()
        params = {
            "response_type": "code",
            "client_id": self._settings.client_id,
            "redirect_uri": redirect_uri,
            "scope": self._settings.scope,
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": CODE_CHALLENGE_METHOD,
            **self._settings.extra_authorization_params,
        }
        return f"{endpoints.authorization_endpoint}?{urlencode(params)}"

    def exchange_code(self, *, code: str, code_verifier: str, redirect_uri: str) -> ProviderTokens:
        if not code:
            raise ProviderError(f"{self.name}: missing authorization code.")

        endpoints = self._resolve_endpoints()
        payload = self._request_json(
            "POST",
            endpoints.token_endpoint,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
                "client_id": self._settings.client_id,
                "client_secret": self._settings.client_secret,
                "code_verifier": code_verifier,
            },
            headers={"Accept": "application/json"},
        )

        access_token = payload.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise ProviderError(f"{self.name}: token response missing access_token.")

        id_token = payload.get("id_token")
        scope = payload.get("scope")
        return ProviderTokens(
            access_token=access_token,
            token_type=str(payload.get("token_type") or "Bearer"),
            id_token=id_token if isinstance(id_token, str) else None,
            scope=scope if isinstance(scope, str) else None,
        )

    def fetch_userinfo(self, access_token: str) -> dict[str, Any]:
        endpoints = self._resolve_endpoints()
        if not endpoints.userinfo_endpoint:
            raise ProviderError(f"{self.name}: userinfo endpoint is not available.")
        return self._request_json(
            "GET",
            endpoints.userinfo_endpoint,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {access_token}",
            },
        )

    def fetch_profile(self, *, tokens: ProviderTokens) -> ProviderProfile:
        return self._normalizer.normalize(tokens=tokens, fetch_userinfo=self.fetch_userinfo)

    def _resolve_endpoints(self) -> ProviderEndpoints:
        with self._lock:
            if self._endpoints is None:
                self._endpoints = self._load_endpoints()
            return self._endpoints

    def _load_endpoints(self) -> ProviderEndpoints:
        settings = self._settings
        if not settings.discovery_url:
            if not settings.authorization_endpoint or not settings.token_endpoint:
                raise ProviderError(f"{self.name}: authorization and token endpoints are required.")
            return ProviderEndpoints(
                authorization_endpoint=settings.authorization_endpoint,
                token_endpoint=settings.token_endpoint,
                userinfo_endpoint=settings.userinfo_endpoint,
            )

        metadata = self._request_json("GET", settings.discovery_url, headers={"Accept": "application/json"})
        authorization_endpoint = settings.authorization_endpoint or metadata.get("authorization_endpoint")
        token_endpoint = settings.token_endpoint or metadata.get("token_endpoint")
        if not authorization_endpoint or not token_endpoint:
            raise ProviderError(f"{self.name}: discovery document missing required endpoints.")

        logger.info("oauth_client: discovered provider=%s issuer=%s", self.name, metadata.get("issuer"))
        return ProviderEndpoints(
            authorization_endpoint=str(authorization_endpoint),
            token_endpoint=str(token_endpoint),
            userinfo_endpoint=settings.userinfo_endpoint or metadata.get("userinfo_endpoint"),
        )

    def _request_json(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{self.name}: {method} {exc.request.url.path} returned {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name}: {method} request failed ({exc.__class__.__name__}).") from exc
        except ValueError as exc:
            raise ProviderError(f"{self.name}: response body is not valid JSON.") from exc

        if not isinstance(payload, dict):
            raise ProviderError(f"{self.name}: unexpected response shape.")
        return payload
