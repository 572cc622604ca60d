from __future__ import annotations

import logging
from datetime import timedelta
from threading import Lock

from league_auth.application.ports.pending_exchange_port import PendingExchangePort
from league_auth.application.services.clock import Clock, utcnow
from league_auth.domain.entities.pending_exchange import PendingExchange


logger = logging.getLogger(__name__)


class InMemoryPendingExchangeRegistry(PendingExchangePort):
    """Process-local registry of in-flight login handshakes.

    ``pop`` removes the entry under the same lock that reads it, so of two
    callbacks racing on one state only the first gets the exchange back.
    """

    def __init__(self, *, sweep_interval_seconds: int = 60, clock: Clock = utcnow):
        self._entries: dict[str, PendingExchange] = {}
        self._lock = Lock()
        self._clock = clock
        self._sweep_interval = timedelta(seconds=sweep_interval_seconds)
        self._last_sweep_at = clock()

    def put(self, exchange: PendingExchange) -> None:
        with self._lock:
            self._entries[exchange.state] = exchange
        self._maybe_cleanup()

    def pop(self, state: str) -> PendingExchange | None:
        with self._lock:
            exchange = self._entries.pop(state, None)
        if exchange is None:
            return None
        if exchange.is_expired(now=self._clock()):
            logger.info("pending_exchange_registry: expired_state provider=%s", exchange.provider)
            return None
        return exchange

    def cleanup_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [state for state, exchange in self._entries.items() if exchange.is_expired(now=now)]
            for state in expired:
                self._entries.pop(state, None)
            self._last_sweep_at = now
        if expired:
            logger.debug("pending_exchange_registry: cleanup_expired removed=%s", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _maybe_cleanup(self) -> None:
        if self._clock() - self._last_sweep_at >= self._sweep_interval:
            self.cleanup_expired()
