from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    provider: str
    provider_subject: str
    email: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class RefreshToken:
    id: str
    user_id: str
    token_hash: str
    expires_at: datetime
    is_revoked: bool
    created_at: datetime

    def is_usable(self, *, now: datetime) -> bool:
        return not self.is_revoked and self.expires_at > now


@dataclass(frozen=True)
class Session:
    id: str
    user_id: str
    expires_at: datetime
    created_at: datetime
    last_accessed_at: datetime
    data: dict[str, Any] = field(default_factory=dict)

    def is_active(self, *, now: datetime) -> bool:
        return self.expires_at > now
