# tests/test_main.py
import asyncio
from datetime import timedelta

import pytest
from sqlmodel import select

from report_tracker import crud
from report_tracker.config import Settings
from report_tracker.database import create_db_and_tables
from report_tracker.main import create_app
from report_tracker.models import AuthSession, PrincipalKind
from report_tracker.sessions import SessionService

pytestmark = pytest.mark.asyncio


def _file_backed_app(tmp_path, clock, **overrides):
    settings = Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'reports.db'}",
        LOG_LEVEL="WARNING",
        **overrides
    )
    return create_app(settings=settings, clock=clock)


async def _session_ids(app):
    async with app.state.session_factory() as db:
        rows = (await db.execute(select(AuthSession))).scalars().all()
    return {row.id for row in rows}


async def test_lifespan_seeds_admin_and_sweeps_sessions(tmp_path, clock):
    app = _file_backed_app(tmp_path, clock, SEED_DEFAULT_ADMIN=True, SESSION_SWEEP_INTERVAL_SECONDS=0.01)

    await create_db_and_tables(app.state.engine)
    async with app.state.session_factory() as db:
        sessions = SessionService(db, clock)
        expired = await sessions.create("old", PrincipalKind.employee)
        clock.advance(timedelta(days=8))
        live = await sessions.create("new", PrincipalKind.admin)

    async with app.router.lifespan_context(app):
        async with app.state.session_factory() as db:
            admin = await crud.authenticate_admin(db, "admin", "admin123")
        assert admin is not None

        for _ in range(200):
            if expired.id not in await _session_ids(app):
                break
            await asyncio.sleep(0.01)

        assert await _session_ids(app) == {live.id}


async def test_lifespan_seed_is_idempotent(tmp_path, clock):
    for _ in range(2):
        app = _file_backed_app(tmp_path, clock, SEED_DEFAULT_ADMIN=True)
        async with app.router.lifespan_context(app):
            async with app.state.session_factory() as db:
                assert await crud.get_admin_by_username(db, "admin") is not None


async def test_lifespan_without_seed(tmp_path, clock):
    app = _file_backed_app(tmp_path, clock, SEED_DEFAULT_ADMIN=False)
    async with app.router.lifespan_context(app):
        async with app.state.session_factory() as db:
            assert await crud.get_admin_by_username(db, "admin") is None
