# tests/test_sessions.py
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import StatementError
from sqlmodel import select

from report_tracker.clock import SystemClock
from report_tracker.main import sweep_expired_sessions
from report_tracker.models import AuthSession, PrincipalKind
from report_tracker.sessions import SessionService

pytestmark = pytest.mark.asyncio


async def test_create_sets_seven_day_expiry(session_factory, clock):
    async with session_factory() as db:
        auth_session = await SessionService(db, clock).create("principal-1", PrincipalKind.employee)

    assert auth_session.user_id == "principal-1"
    assert auth_session.user_type == PrincipalKind.employee
    assert auth_session.expires_at - auth_session.created_at == timedelta(days=7)


async def test_tokens_are_unique_and_opaque(session_factory, clock):
    async with session_factory() as db:
        sessions = SessionService(db, clock)
        first = await sessions.create("p", PrincipalKind.admin)
        second = await sessions.create("p", PrincipalKind.admin)

    assert first.id != second.id
    assert len(first.id) >= 32


async def test_resolve_until_expiry(session_factory, clock):
    async with session_factory() as db:
        sessions = SessionService(db, clock)
        token = (await sessions.create("p", PrincipalKind.employee)).id

        clock.advance(timedelta(days=7) - timedelta(seconds=1))
        assert await sessions.resolve(token) is not None

        # Expired at exactly now == expires_at, with the row still present.
        clock.advance(timedelta(seconds=1))
        assert await sessions.resolve(token) is None

        rows = (await db.execute(select(AuthSession))).scalars().all()
        assert len(rows) == 1


async def test_resolve_unknown_token(session_factory, clock):
    async with session_factory() as db:
        assert await SessionService(db, clock).resolve("missing") is None


async def test_delete_is_idempotent(session_factory, clock):
    async with session_factory() as db:
        sessions = SessionService(db, clock)
        token = (await sessions.create("p", PrincipalKind.employee)).id

        await sessions.delete(token)
        await sessions.delete(token)
        assert await sessions.resolve(token) is None


async def test_principal_may_hold_several_sessions(session_factory, clock):
    async with session_factory() as db:
        sessions = SessionService(db, clock)
        first = await sessions.create("p", PrincipalKind.employee)
        second = await sessions.create("p", PrincipalKind.employee)

        await sessions.delete(first.id)
        assert await sessions.resolve(second.id) is not None


async def test_sweep_removes_only_expired(session_factory, clock):
    async with session_factory() as db:
        sessions = SessionService(db, clock)
        old = await sessions.create("old", PrincipalKind.employee)
        clock.advance(timedelta(days=3))
        fresh = await sessions.create("fresh", PrincipalKind.admin)
        clock.advance(timedelta(days=4))

        removed = await sessions.sweep()
        assert removed == 1

        ids = {row.id for row in (await db.execute(select(AuthSession))).scalars().all()}
        assert ids == {fresh.id}
        assert old.id not in ids


async def test_custom_ttl(session_factory, clock):
    async with session_factory() as db:
        auth_session = await SessionService(db, clock, ttl_days=1).create("p", PrincipalKind.admin)
    assert auth_session.expires_at == clock.now() + timedelta(days=1)


async def test_app_sweeper_uses_app_clock(app, session_factory, clock):
    async with session_factory() as db:
        await SessionService(db, clock).create("p", PrincipalKind.employee)

    assert await sweep_expired_sessions(app) == 0
    clock.advance(timedelta(days=8))
    assert await sweep_expired_sessions(app) == 1


async def test_expiry_reads_back_as_utc(session_factory, clock):
    async with session_factory() as db:
        token = (await SessionService(db, clock).create("p", PrincipalKind.employee)).id

    # A fresh session loads the row from the database, not the identity map.
    async with session_factory() as db:
        auth_session = await SessionService(db, clock).resolve(token)

    assert auth_session is not None
    assert auth_session.expires_at.tzinfo is not None
    assert auth_session.expires_at == clock.now() + timedelta(days=7)
    assert auth_session.created_at == clock.now()


async def test_naive_timestamps_are_rejected(session_factory):
    async with session_factory() as db:
        db.add(AuthSession(
            id="naive",
            user_id="p",
            user_type=PrincipalKind.admin,
            expires_at=datetime(2025, 1, 22),
            created_at=datetime(2025, 1, 15)
        ))
        with pytest.raises(StatementError):
            await db.commit()
        await db.rollback()


async def test_system_clock_is_utc():
    now = SystemClock().now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
