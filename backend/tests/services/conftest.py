"""Service test fixtures — async in-memory DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database built from Base.metadata
    - The app under test is built around the same DatabaseSessionManager
    - client has no token configured; token_client requires "s3cret"
"""

import pytest
from httpx import ASGITransport, AsyncClient

from shaker.config import Settings
from shaker.db.base import Base
from shaker.infrastructure.database import DatabaseSessionManager
from shaker.main import create_app
import shaker.models  # noqa: F401


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
async def test_db(db_manager):
    async with db_manager.session() as session:
        yield session


async def _client_for(settings: Settings, db_manager: DatabaseSessionManager):
    app = create_app(settings, db_manager)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(db_manager):
    """Test client with no token configured."""
    async with await _client_for(Settings(token=None), db_manager) as c:
        yield c


@pytest.fixture
async def token_client(db_manager):
    """Test client whose app requires ?token=s3cret."""
    async with await _client_for(Settings(token="s3cret"), db_manager) as c:
        yield c
