"""Pytest configuration."""

import asyncio
import os

import pytest

# Ensure test environment
os.environ.setdefault("CT_DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("CT_ADMIN_USERNAME", "admin")
os.environ.setdefault("CT_ADMIN_PASSWORD", "test-password")
os.environ.setdefault("CT_DEBUG", "true")


@pytest.fixture
def run_db(tmp_path):
    """
    Run an async scenario against a fresh SQLite file.

    The scenario gets an async_sessionmaker; each concurrent actor should
    open its own session from it.
    """
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from app.models.tables import Base

    url = f"sqlite+aiosqlite:///{tmp_path / 'core.db'}"

    def run(scenario):
        async def main():
            engine = create_async_engine(url, connect_args={"timeout": 15})
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            sessions = async_sessionmaker(engine, expire_on_commit=False)
            try:
                return await scenario(sessions)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return run


@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient against the real app, backed by a per-test SQLite file."""
    from fastapi.testclient import TestClient
    from app.config import get_settings
    from app.models import database
    from app.main import app

    monkeypatch.setenv("CT_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("CT_BASE_URL", "https://trk.test")
    get_settings.cache_clear()
    database._engine = None
    database._async_session = None

    with TestClient(app, follow_redirects=False) as c:
        yield c

    get_settings.cache_clear()
