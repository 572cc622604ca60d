from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BeginLoginInput:
    provider: str


@dataclass(frozen=True)
class BeginLoginOutput:
    redirect_url: str
    state: str


@dataclass(frozen=True)
class CompleteLoginInput:
    provider: str
    state: str
    code: str


@dataclass(frozen=True)
class IssuedTokens:
    access_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class RefreshedAccessToken:
    access_token: str
    expires_in: int


@dataclass(frozen=True)
class LoginOutput:
    user_id: str
    access_token: str
    refresh_token: str
    expires_in: int
    session_id: str


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str
    provider: str


@dataclass(frozen=True)
class ProviderTokens:
    access_token: str
    token_type: str
    id_token: str | None
    scope: str | None


@dataclass(frozen=True)
class ProviderProfile:
    subject: str
    email: str
    name: str
