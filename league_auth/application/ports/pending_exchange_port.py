from __future__ import annotations

from typing import Protocol

from league_auth.domain.entities.pending_exchange import PendingExchange


class PendingExchangePort(Protocol):
    def put(self, exchange: PendingExchange) -> None:
        ...

    def pop(self, state: str) -> PendingExchange | None:
        ...

    def cleanup_expired(self) -> int:
        ...
