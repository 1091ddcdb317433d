"""
Shared async engine and session factory.

One engine (and therefore one connection pool) serves the whole process.
It is created lazily on first use, or explicitly through ``init_database``
by the app lifespan and by tests that point it at another URL.
"""

import os
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None
_lock = threading.Lock()


def get_database_url() -> str:
    """Database URL from ``SOCIALGRAPH_DATABASE_URL``, falling back to settings.

    The environment is read on every call so tests can repoint the URL after
    settings were loaded.
    """
    return os.environ.get("SOCIALGRAPH_DATABASE_URL") or settings.database_url


def to_async_url(db_url: str) -> str:
    """Rewrite a plain ``postgresql://`` or ``sqlite://`` URL to its async driver."""
    for plain, driver in _ASYNC_DRIVERS.items():
        if db_url.startswith(plain):
            return driver + db_url[len(plain) :]
    return db_url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for_url(db_url: str, *, echo: bool | None = None) -> AsyncEngine:
    """Build an async engine; SQLite gets no pooling and enforced foreign keys."""
    async_url = to_async_url(db_url)
    if echo is None:
        echo = settings.sql_echo

    if async_url.startswith("sqlite"):
        engine = create_async_engine(async_url, echo=echo, poolclass=NullPool)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        async_url,
        echo=echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Create the shared engine and session factory.

    A no-op when already initialized, unless ``database_url`` is given or
    ``force_reinit`` is set.
    """
    global _engine, _sessionmaker

    with _lock:
        if _engine is not None and database_url is None and not force_reinit:
            return

        engine = create_engine_for_url(database_url or get_database_url())
        _engine = engine
        _sessionmaker = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)

    logger.info("Database initialized", database_url=engine.url.render_as_string())


def reset_database() -> None:
    """Forget the shared engine without disposing it (tests)."""
    global _engine, _sessionmaker
    with _lock:
        _engine = None
        _sessionmaker = None


async def dispose_database() -> None:
    """Close pooled connections and forget the shared engine."""
    engine = _engine
    reset_database()
    if engine is not None:
        await engine.dispose()
        logger.debug("Database engine disposed")


def get_async_engine() -> AsyncEngine:
    if _engine is None:
        init_database()
    assert _engine is not None
    return _engine


async def check_database_connection() -> tuple[bool, str | None]:
    """Run ``SELECT 1`` on the shared engine.

    Returns:
        (True, None) on success, otherwise (False, a description of the failure)
    """
    if _engine is None:
        return False, "Database engine not initialized"

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        return False, f"{type(e).__name__}: {e}"
    return True, None


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on error."""
    if _sessionmaker is None:
        init_database()
    if _sessionmaker is None:
        raise RuntimeError("Database not initialized")

    async with _sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
