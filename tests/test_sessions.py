"""Tests for session creation, validation, revocation and sweeping."""

import asyncio

import pytest

from trip_planner_api.app.core.errors import (
    SessionExpiredError,
    SessionNotFoundError,
    UnauthenticatedError,
)
from trip_planner_api.app.services.session_service import SessionManager, SessionSweeper


def test_create_and_validate(session_manager, store):
    token = session_manager.create("user-1")
    assert session_manager.validate(token) == "user-1"
    session = store.sessions.get(token)
    assert session.expires_at - session.created_at == session_manager.ttl


def test_unknown_token_is_not_found(session_manager):
    with pytest.raises(SessionNotFoundError):
        session_manager.validate("nope")


def test_expired_token_is_deleted_on_lookup(session_manager, store, clock):
    token = session_manager.create("user-1")
    clock.advance(days=7)
    with pytest.raises(SessionExpiredError):
        session_manager.validate(token)
    assert store.sessions.get(token) is None
    # Second lookup no longer finds it at all.
    with pytest.raises(SessionNotFoundError):
        session_manager.validate(token)


def test_both_failures_are_unauthenticated():
    assert issubclass(SessionNotFoundError, UnauthenticatedError)
    assert issubclass(SessionExpiredError, UnauthenticatedError)


def test_validity_is_monotonic_until_expiry(session_manager, clock):
    token = session_manager.create("user-1")
    for _ in range(5):
        clock.advance(days=1)
        assert session_manager.validate(token) == "user-1"
    clock.advance(days=2, seconds=-1)
    assert session_manager.validate(token) == "user-1"
    clock.advance(seconds=1)
    with pytest.raises(SessionExpiredError):
        session_manager.validate(token)


def test_revoke_is_idempotent(session_manager):
    token = session_manager.create("user-1")
    assert session_manager.revoke(token) is True
    assert session_manager.revoke(token) is False
    assert session_manager.revoke("never-issued") is False
    with pytest.raises(SessionNotFoundError):
        session_manager.validate(token)


def test_sweep_purges_only_expired_sessions(session_manager, store, clock):
    old = session_manager.create("user-1")
    clock.advance(days=5)
    fresh = session_manager.create("user-2")
    clock.advance(days=3)

    assert session_manager.sweep() == 1
    assert store.sessions.get(old) is None
    assert session_manager.validate(fresh) == "user-2"
    with pytest.raises(SessionNotFoundError):
        session_manager.validate(old)


def test_tokens_are_distinct(session_manager):
    tokens = {session_manager.create("user-1") for _ in range(50)}
    assert len(tokens) == 50


@pytest.mark.asyncio
async def test_sweeper_runs_in_background_and_stops(store, clock):
    manager = SessionManager(store, clock=clock)
    token = manager.create("user-1")
    clock.advance(days=8)

    sweeper = SessionSweeper(manager, interval_seconds=0.01)
    sweeper.start()
    assert sweeper.running
    await asyncio.sleep(0.1)
    await sweeper.stop()

    assert not sweeper.running
    assert store.sessions.get(token) is None


@pytest.mark.asyncio
async def test_sweeper_survives_failing_sweep(store, clock):
    manager = SessionManager(store, clock=clock)
    calls = []

    def broken_sweep():
        calls.append(1)
        raise RuntimeError("boom")

    manager.sweep = broken_sweep
    sweeper = SessionSweeper(manager, interval_seconds=0.01)
    sweeper.start()
    await asyncio.sleep(0.1)
    assert sweeper.running
    await sweeper.stop()
    assert len(calls) >= 2
