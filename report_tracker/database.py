# database.py
from typing import AsyncIterator

from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``database_url``.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    if database_url.startswith("sqlite") and (":memory:" in database_url or database_url.endswith("://")):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(database_url, echo=echo, future=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_db_and_tables(engine: AsyncEngine) -> None:
    """Initializes the database tables."""
    # Registers the table classes on SQLModel.metadata.
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_async_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency to get an async database session."""
    async with request.app.state.session_factory() as session:
        yield session
