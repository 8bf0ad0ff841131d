"""Async database engine and session management."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from app.config import get_settings
from app.models.tables import Base

# Lazy initialization — engine created on first use, not at import time.
# This prevents alembic (which runs synchronously) from crashing when
# other modules import from here at the module level.
_engine = None
_async_session = None


def _get_engine():
    global _engine
    if _engine is None:
        settings = get_settings()
        if settings.database_url.startswith("sqlite"):
            # SQLite serializes writers; a busy timeout lets racing inserts wait
            # for the lock instead of failing with "database is locked".
            _engine = create_async_engine(
                settings.database_url,
                connect_args={"timeout": 15},
                echo=settings.debug,
            )
        else:
            _engine = create_async_engine(
                settings.database_url,
                pool_size=20,
                max_overflow=10,
                pool_pre_ping=True,
                echo=settings.debug,
            )
    return _engine


def _get_session_maker():
    global _async_session
    if _async_session is None:
        _async_session = async_sessionmaker(
            _get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session


async def create_tables():
    """Create any missing tables. Used at startup for single-node deployments."""
    async with _get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine():
    """Close pooled connections and forget the engine (shutdown, tests)."""
    global _engine, _async_session
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session = None


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields an async session."""
    session_maker = _get_session_maker()
    async with session_maker() as session:
        yield session
