"""
Shared pytest fixtures: a throwaway SQLite database per test, a gateway bound
to it, and a FastAPI test client running the full application lifespan.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from taskify.config import DatabaseSettings, ServerSettings, Settings
from taskify.database.query_gateway import QueryGateway
from taskify.database.schema import create_schema
from taskify.server.main import create_app


@pytest.fixture
def db_settings(tmp_path) -> DatabaseSettings:
    """Database settings pointing at a fresh SQLite file."""
    return DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")


@pytest.fixture
def settings(db_settings) -> Settings:
    return Settings(database=db_settings, server=ServerSettings(init_schema=True))


@pytest.fixture
def client(settings):
    """TestClient for an app whose lifespan creates the schema."""
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def gateway(db_settings):
    """Query gateway with the tasks table already created."""
    query_gateway = QueryGateway(db_settings)
    await create_schema(query_gateway)
    yield query_gateway
    await query_gateway.close()
