import os
import sys
import asyncio

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Settings must be in place before the application modules are imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:5173")
os.environ.setdefault("DISABLE_RATE_LIMITS", "true")
os.environ.setdefault("SEED_ON_STARTUP", "false")

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rivalry import db, models  # noqa: F401
from rivalry.services.roster import Roster
from rivalry.services.seeding import ensure_roster

ROSTER = Roster(me="Shakthi", friend="Shynu")


@pytest.fixture()
def session_maker():
    """Fresh in-memory database with every table created."""

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async def init_models():
        async with engine.begin() as conn:
            await conn.run_sync(db.Base.metadata.create_all)

    asyncio.run(init_models())
    yield sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    asyncio.run(engine.dispose())


@pytest.fixture()
def seeded(session_maker):
    async def seed():
        async with session_maker() as session:
            await ensure_roster(session, ROSTER)
            await session.commit()

    asyncio.run(seed())
    return session_maker


@pytest.fixture()
def client(seeded):
    from fastapi.testclient import TestClient
    from rivalry.main import app

    async def override_get_session():
        async with seeded() as session:
            yield session

    app.dependency_overrides[db.get_session] = override_get_session
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
