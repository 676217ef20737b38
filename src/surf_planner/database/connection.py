"""Engine and session lifecycle for the planner database.

One async engine is shared by the process. `init_db()` builds it from
`DATABASE_URL` (PostgreSQL via asyncpg in deployments, SQLite via aiosqlite
for local runs and tests) and `close_db()` disposes of it. Pool sizing only
applies to PostgreSQL.

Request handlers get a session through the `get_db_session` dependency;
scripts use `get_db()` directly:

```python
await init_db()
async with get_db() as session:
    breaks = await BreakRepository(session).list_breaks("Ericeira")
await close_db()
```
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from surf_planner.config import get_settings
from surf_planner.database.models import Base

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(database_url: str) -> dict[str, Any]:
    settings = get_settings()
    options: dict[str, Any] = {"echo": settings.database_echo}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )
    return options


def _require_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database is not open; call init_db() first")
    return _engine


async def init_db(database_url: str | None = None) -> None:
    """Open the shared engine and session factory."""
    global _engine, _session_factory

    url = database_url or get_settings().database_url
    _engine = create_async_engine(url, **_engine_options(url))
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info(f"Opened database engine ({_engine.url.get_backend_name()})")


async def close_db() -> None:
    """Dispose of the shared engine, if open."""
    global _engine, _session_factory

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Closed database engine")


async def create_tables() -> None:
    """Create any missing planner tables on the open engine.

    Existing tables are left untouched; there is no migration support.
    """
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Ensured tables: {', '.join(sorted(Base.metadata.tables))}")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the engine opened by init_db()."""
    _require_engine()
    return _session_factory


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """A session that rolls back on error and is always closed.

    Nothing is committed implicitly.
    """
    session = get_session_factory()()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db() as session:
        yield session
