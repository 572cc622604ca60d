from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PendingExchange:
    """PKCE/state handshake of a single login attempt.

    Lives only in process memory between the login redirect and the provider
    callback, and is consumed exactly once.
    """

    state: str
    code_verifier: str
    provider: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, *, now: datetime) -> bool:
        return self.expires_at <= now
