from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidProviderError(DomainError):
    """Requested identity provider is unknown or not configured."""


class InvalidStateError(DomainError):
    """OAuth state is missing, expired, already consumed or bound to another provider."""


class AuthenticationFailedError(DomainError):
    """Provider code exchange or profile fetch failed."""


class InvalidRefreshTokenError(DomainError):
    """Refresh token is unknown, revoked, expired or orphaned."""


class DuplicateIdentityError(DomainError):
    """A user already exists for the (provider, subject) pair."""


class InvalidAccessTokenError(DomainError):
    """Access token signature, type or claims are invalid."""


class ProviderError(DomainError):
    """Identity provider request failed or returned an unusable response."""
