from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from league_auth.application.services.session_manager import SessionManager
from league_auth.domain.entities.user import Session


class FakeSessionPort:
    def __init__(self):
        self.sessions: dict[str, Session] = {}

    def create_session(self, *, session_id, user_id, data, expires_at, created_at) -> Session:
        session = Session(
            id=session_id,
            user_id=user_id,
            data=data,
            expires_at=expires_at,
            created_at=created_at,
            last_accessed_at=created_at,
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, *, session_id: str) -> Session | None:
        return self.sessions.get(session_id)

    def touch_session(self, *, session_id: str, accessed_at: datetime) -> None:
        session = self.sessions.get(session_id)
        if session is not None:
            self.sessions[session_id] = replace(session, last_accessed_at=accessed_at)

    def extend_session(self, *, session_id: str, expires_at: datetime, accessed_at: datetime) -> Session | None:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        self.sessions[session_id] = replace(session, expires_at=expires_at, last_accessed_at=accessed_at)
        return self.sessions[session_id]

    def update_session_data(self, *, session_id: str, data, accessed_at: datetime) -> Session | None:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        self.sessions[session_id] = replace(session, data=data, last_accessed_at=accessed_at)
        return self.sessions[session_id]

    def delete_session(self, *, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def delete_user_sessions(self, *, user_id: str) -> int:
        doomed = [sid for sid, session in self.sessions.items() if session.user_id == user_id]
        for session_id in doomed:
            del self.sessions[session_id]
        return len(doomed)

    def list_active_user_sessions(self, *, user_id: str, now: datetime) -> list[Session]:
        return [s for s in self.sessions.values() if s.user_id == user_id and s.expires_at > now]

    def delete_expired_sessions(self, *, now: datetime) -> int:
        doomed = [sid for sid, session in self.sessions.items() if session.expires_at <= now]
        for session_id in doomed:
            del self.sessions[session_id]
        return len(doomed)


def _manager(clock) -> tuple[SessionManager, FakeSessionPort]:
    port = FakeSessionPort()
    return SessionManager(session_port=port, clock=clock), port


def test_create_session_expires_after_twenty_four_hours(clock):
    manager, _ = _manager(clock)
    data = {"provider": "google"}

    session = manager.create_session(user_id="user-1", data=data)
    data["provider"] = "mutated"

    assert session.expires_at == clock() + timedelta(hours=24)
    assert session.last_accessed_at == clock()
    assert session.data == {"provider": "google"}


def test_get_session_bumps_last_access_without_extending(clock):
    manager, port = _manager(clock)
    created = manager.create_session(user_id="user-1", data={})

    clock.advance(hours=23)
    session = manager.get_session(session_id=created.id)

    assert session is not None
    assert session.last_accessed_at == clock()
    assert session.expires_at == created.expires_at
    assert port.sessions[created.id].last_accessed_at == clock()


def test_get_session_returns_none_once_expired(clock):
    manager, port = _manager(clock)
    created = manager.create_session(user_id="user-1", data={})

    clock.advance(hours=25)

    assert manager.get_session(session_id=created.id) is None
    assert manager.touch_session(session_id=created.id) is None
    assert port.sessions[created.id].last_accessed_at == created.last_accessed_at


def test_get_session_returns_none_for_unknown_id(clock):
    manager, _ = _manager(clock)
    assert manager.get_session(session_id="missing") is None


def test_touch_session_extends_when_under_an_hour_remains(clock):
    manager, _ = _manager(clock)
    created = manager.create_session(user_id="user-1", data={})

    clock.advance(hours=23, minutes=30)
    session = manager.touch_session(session_id=created.id)

    assert session is not None
    assert session.expires_at == clock() + timedelta(hours=24)
    assert session.last_accessed_at == clock()


def test_touch_session_leaves_expiry_alone_with_time_to_spare(clock):
    manager, _ = _manager(clock)
    created = manager.create_session(user_id="user-1", data={})

    clock.advance(hours=2)
    session = manager.touch_session(session_id=created.id)

    assert session is not None
    assert session.expires_at == created.expires_at


def test_extend_session_renews_expiry(clock):
    manager, _ = _manager(clock)
    created = manager.create_session(user_id="user-1", data={})

    clock.advance(hours=10)
    session = manager.extend_session(session_id=created.id)

    assert session is not None
    assert session.expires_at == clock() + timedelta(hours=24)
    assert manager.extend_session(session_id="missing") is None


def test_update_session_merges_shallowly(clock):
    manager, _ = _manager(clock)
    created = manager.create_session(
        user_id="user-1",
        data={"provider": "google", "prefs": {"theme": "dark", "lang": "en"}},
    )

    clock.advance(minutes=1)
    session = manager.update_session(session_id=created.id, data={"prefs": {"theme": "light"}, "league": "nfl"})

    assert session is not None
    assert session.data == {"provider": "google", "prefs": {"theme": "light"}, "league": "nfl"}
    assert session.last_accessed_at == clock()


def test_update_session_ignores_expired_or_missing_sessions(clock):
    manager, port = _manager(clock)
    created = manager.create_session(user_id="user-1", data={"provider": "google"})

    clock.advance(days=2)

    assert manager.update_session(session_id=created.id, data={"league": "nfl"}) is None
    assert manager.update_session(session_id="missing", data={"league": "nfl"}) is None
    assert port.sessions[created.id].data == {"provider": "google"}


def test_user_sessions_listing_and_bulk_delete(clock):
    manager, port = _manager(clock)
    expired = manager.create_session(user_id="user-1", data={})
    clock.advance(hours=25)
    first = manager.create_session(user_id="user-1", data={})
    second = manager.create_session(user_id="user-1", data={})
    other = manager.create_session(user_id="user-2", data={})

    active_ids = {session.id for session in manager.get_user_sessions(user_id="user-1")}

    assert active_ids == {first.id, second.id}
    assert expired.id not in active_ids
    assert manager.delete_user_sessions(user_id="user-1") == 3
    assert list(port.sessions) == [other.id]


def test_delete_session_and_cleanup(clock):
    manager, port = _manager(clock)
    stale = manager.create_session(user_id="user-1", data={})
    clock.advance(hours=24)
    live = manager.create_session(user_id="user-1", data={})
    doomed = manager.create_session(user_id="user-1", data={})

    manager.delete_session(session_id=doomed.id)

    assert manager.cleanup_expired_sessions() == 1
    assert list(port.sessions) == [live.id]
    assert stale.id not in port.sessions
