from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from league_auth.domain.exceptions import DuplicateIdentityError
from league_auth.infrastructure.db.repositories.identity_repository import SqlIdentityRepository
from league_auth.infrastructure.db.repositories.refresh_token_repository import SqlRefreshTokenRepository
from league_auth.infrastructure.db.repositories.session_repository import SqlSessionRepository


def _create_user(engine, clock, *, provider: str = "google", subject: str = "google-sub-1"):
    return SqlIdentityRepository(engine).create_user(
        user_id=str(uuid4()),
        provider=provider,
        provider_subject=subject,
        email="alice@example.com",
        name="Alice",
        created_at=clock(),
    )


def _create_token(engine, clock, user_id: str, token_hash: str, *, ttl: timedelta = timedelta(days=30)):
    return SqlRefreshTokenRepository(engine).create_refresh_token(
        token_id=str(uuid4()),
        user_id=user_id,
        token_hash=token_hash,
        expires_at=clock() + ttl,
        created_at=clock(),
    )


def _create_session(engine, clock, user_id: str, *, ttl: timedelta = timedelta(hours=24), data=None):
    return SqlSessionRepository(engine).create_session(
        session_id=str(uuid4()),
        user_id=user_id,
        data=data or {"provider": "google"},
        expires_at=clock() + ttl,
        created_at=clock(),
    )


def test_identity_lookup_by_provider_subject_and_id(db_engine, clock):
    repo = SqlIdentityRepository(db_engine)
    user = _create_user(db_engine, clock)

    by_subject = repo.get_user_by_provider_subject(provider="google", provider_subject="google-sub-1")
    by_id = repo.get_user_by_id(user_id=user.id)

    assert by_subject == user
    assert by_id == user
    assert user.created_at == clock()
    assert repo.get_user_by_provider_subject(provider="discord", provider_subject="google-sub-1") is None
    assert repo.get_user_by_id(user_id="not-a-uuid") is None


def test_identity_pair_is_unique(db_engine, clock):
    _create_user(db_engine, clock)

    with pytest.raises(DuplicateIdentityError):
        _create_user(db_engine, clock)

    other = _create_user(db_engine, clock, provider="discord")
    assert other.provider == "discord"


def test_refresh_token_round_trip_and_revoke(db_engine, clock):
    repo = SqlRefreshTokenRepository(db_engine)
    user = _create_user(db_engine, clock)
    created = _create_token(db_engine, clock, user.id, "digest-1")

    fetched = repo.get_refresh_token_by_hash(token_hash="digest-1")
    assert fetched == created
    assert fetched.is_usable(now=clock()) is True

    repo.revoke_refresh_token(token_hash="digest-1")
    repo.revoke_refresh_token(token_hash="digest-unknown")

    revoked = repo.get_refresh_token_by_hash(token_hash="digest-1")
    assert revoked is not None
    assert revoked.is_revoked is True
    assert revoked.is_usable(now=clock()) is False


def test_refresh_token_digest_is_unique(db_engine, clock):
    user = _create_user(db_engine, clock)
    _create_token(db_engine, clock, user.id, "digest-1")

    with pytest.raises(IntegrityError):
        _create_token(db_engine, clock, user.id, "digest-1")


def test_refresh_token_cleanup_deletes_exactly_expired_or_revoked(db_engine, clock):
    repo = SqlRefreshTokenRepository(db_engine)
    user = _create_user(db_engine, clock)
    _create_token(db_engine, clock, user.id, "expired", ttl=timedelta(hours=1))
    _create_token(db_engine, clock, user.id, "revoked")
    _create_token(db_engine, clock, user.id, "live")
    repo.revoke_refresh_token(token_hash="revoked")

    clock.advance(hours=1)

    assert repo.delete_expired_or_revoked(now=clock()) == 2
    assert repo.get_refresh_token_by_hash(token_hash="live") is not None
    assert repo.get_refresh_token_by_hash(token_hash="expired") is None
    assert repo.get_refresh_token_by_hash(token_hash="revoked") is None


def test_session_touch_extend_and_update(db_engine, clock):
    repo = SqlSessionRepository(db_engine)
    user = _create_user(db_engine, clock)
    session = _create_session(db_engine, clock, user.id)
    assert session.last_accessed_at == session.created_at == clock()

    clock.advance(hours=1)
    repo.touch_session(session_id=session.id, accessed_at=clock())
    touched = repo.get_session(session_id=session.id)
    assert touched is not None
    assert touched.last_accessed_at == clock()
    assert touched.expires_at == session.expires_at

    extended = repo.extend_session(session_id=session.id, expires_at=clock() + timedelta(hours=24), accessed_at=clock())
    assert extended is not None
    assert extended.expires_at == clock() + timedelta(hours=24)

    updated = repo.update_session_data(
        session_id=session.id,
        data={"provider": "google", "league": "nfl"},
        accessed_at=clock(),
    )
    assert updated is not None
    assert updated.data == {"provider": "google", "league": "nfl"}


def test_session_lookups_tolerate_malformed_ids(db_engine, clock):
    repo = SqlSessionRepository(db_engine)

    assert repo.get_session(session_id="garbage") is None
    assert repo.extend_session(session_id="garbage", expires_at=clock(), accessed_at=clock()) is None
    assert repo.update_session_data(session_id=str(uuid4()), data={}, accessed_at=clock()) is None
    assert repo.delete_user_sessions(user_id="garbage") == 0
    assert repo.list_active_user_sessions(user_id="garbage", now=clock()) == []


def test_session_listing_and_deletes(db_engine, clock):
    repo = SqlSessionRepository(db_engine)
    alice = _create_user(db_engine, clock)
    bob = _create_user(db_engine, clock, subject="google-sub-2")
    stale = _create_session(db_engine, clock, alice.id, ttl=timedelta(hours=1))
    live = _create_session(db_engine, clock, alice.id)
    doomed = _create_session(db_engine, clock, alice.id)
    bobs = _create_session(db_engine, clock, bob.id)

    clock.advance(hours=2)

    assert {s.id for s in repo.list_active_user_sessions(user_id=alice.id, now=clock())} == {live.id, doomed.id}
    repo.delete_session(session_id=doomed.id)
    assert repo.get_session(session_id=doomed.id) is None
    assert repo.delete_expired_sessions(now=clock()) == 1
    assert repo.get_session(session_id=stale.id) is None
    assert repo.delete_user_sessions(user_id=alice.id) == 1
    assert repo.get_session(session_id=bobs.id) is not None
