"""API test fixtures — FastAPI test client with app.state composed by hand.

Invariants:
    - ASGITransport does not run the lifespan: fixtures put catalog, chat service
      and chat client on app.state the way main.lifespan does
    - db_manager patched to wrap an in-memory SQLite engine (readiness probe)
    - Chat service runs on FakeAssistantClient; tests append scripts to it
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

import data_copilot.infrastructure.database as db_module
from data_copilot.db.base import Base
from data_copilot.infrastructure.database import DatabaseSessionManager
from data_copilot.main import app
from data_copilot.services.chat_client import ChatClient
from data_copilot.services.chat_service import ChatService
from data_copilot.services.schema_catalog import SchemaCatalog
from tests.services.fake_assistant import FakeAssistantClient

_COMPONENTS = ("catalog", "chat_service", "chat_client")


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def fake_assistant():
    return FakeAssistantClient()


@pytest.fixture
def chat_service(fake_assistant):
    return ChatService(fake_assistant, "claude-sonnet-4-5", streaming=True)


@pytest.fixture
async def client(test_engine, chat_service):
    app.state.catalog = SchemaCatalog(Base.registry)
    app.state.chat_service = chat_service
    app.state.chat_client = ChatClient(chat_service)

    original_manager = db_module.db_manager
    db_module.db_manager = DatabaseSessionManager(
        "sqlite+aiosqlite://", engine=test_engine,
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager
    for name in _COMPONENTS:
        setattr(app.state, name, None)
