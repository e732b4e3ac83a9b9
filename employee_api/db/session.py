"""
Async SQLAlchemy engine & session factory (asyncpg driver in production,
aiosqlite in tests).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str) -> AsyncEngine:
    engine_args: dict = {
        "echo": False,
        "pool_pre_ping": True,
    }

    if "postgresql" in database_url:
        engine_args.update(
            {
                "pool_size": 20,
                "max_overflow": 10,
                "pool_recycle": 300,
            }
        )
    elif database_url.startswith("sqlite") and ":memory:" in database_url:
        # One shared connection, otherwise every session sees an empty database
        engine_args.update(
            {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        )

    return create_async_engine(database_url, **engine_args)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession and closes it after use."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
