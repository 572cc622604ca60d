from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from league_auth.domain.entities.pending_exchange import PendingExchange
from league_auth.infrastructure.state.pending_exchange_registry import InMemoryPendingExchangeRegistry


def _exchange(clock, state: str, *, ttl_minutes: int = 10) -> PendingExchange:
    return PendingExchange(
        state=state,
        code_verifier=f"verifier-{state}",
        provider="google",
        created_at=clock(),
        expires_at=clock() + timedelta(minutes=ttl_minutes),
    )


def test_pop_returns_exchange_only_once(clock):
    registry = InMemoryPendingExchangeRegistry(clock=clock)
    registry.put(_exchange(clock, "state-1"))

    first = registry.pop("state-1")
    second = registry.pop("state-1")

    assert first is not None
    assert first.code_verifier == "verifier-state-1"
    assert second is None
    assert len(registry) == 0


def test_pop_of_unknown_state_returns_none(clock):
    registry = InMemoryPendingExchangeRegistry(clock=clock)
    assert registry.pop("never-issued") is None


def test_pop_after_ttl_returns_none_and_drops_entry(clock):
    registry = InMemoryPendingExchangeRegistry(clock=clock)
    registry.put(_exchange(clock, "state-1"))

    clock.advance(minutes=10, seconds=1)

    assert registry.pop("state-1") is None
    assert len(registry) == 0


def test_cleanup_expired_removes_only_stale_entries(clock):
    registry = InMemoryPendingExchangeRegistry(clock=clock)
    registry.put(_exchange(clock, "short", ttl_minutes=1))
    registry.put(_exchange(clock, "long", ttl_minutes=10))

    clock.advance(minutes=5)

    assert registry.cleanup_expired() == 1
    assert len(registry) == 1
    assert registry.pop("long") is not None


def test_put_sweeps_expired_entries_after_interval(clock):
    registry = InMemoryPendingExchangeRegistry(sweep_interval_seconds=60, clock=clock)
    registry.put(_exchange(clock, "abandoned", ttl_minutes=1))

    clock.advance(minutes=2)
    registry.put(_exchange(clock, "fresh"))

    assert len(registry) == 1


def test_concurrent_pops_hand_the_exchange_to_a_single_caller(clock):
    registry = InMemoryPendingExchangeRegistry(clock=clock)
    registry.put(_exchange(clock, "contested"))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: registry.pop("contested"), range(16)))

    assert sum(result is not None for result in results) == 1
