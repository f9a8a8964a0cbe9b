"""Data Copilot API — FastAPI application entry point and composition root.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DataCopilotError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The lifespan is the only place that composes services: database, catalog,
      data tools, assistant client, chat service, chat client (in that order)
    - Shutdown always runs chat_service.shutdown() before the engine is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Composed objects live on app.state, resolved by api/dependencies.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from data_copilot.api.error_handlers import register_error_handlers
from data_copilot.api.routes import chat, health, schema
from data_copilot.config import get_settings
from data_copilot.db.base import Base
from data_copilot.infrastructure.database import init_db
from data_copilot.infrastructure.observability import setup_logging
from data_copilot.services.assistant_session import AnthropicAssistantClient
from data_copilot.services.chat_client import ChatClient
from data_copilot.services.chat_service import ChatService
from data_copilot.services.data_tools import DataTools
from data_copilot.services.schema_catalog import SchemaCatalog
from data_copilot.services.seed_data import seed_demo_data
from data_copilot.services.system_prompt import generate_system_prompt
import data_copilot.models  # noqa: F401  (registers every mapper before discovery)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_schema:
        await db.create_all()
    if settings.seed_demo_data:
        async with db.session() as session:
            await seed_demo_data(session)

    catalog = SchemaCatalog(Base.registry)
    data_tools = DataTools(catalog, db.session)
    assistant = AnthropicAssistantClient.from_settings(settings, db.session_factory)
    chat_service = ChatService(
        assistant,
        settings.assistant_model,
        tools=data_tools.tools,
        system_message=generate_system_prompt(catalog.schema),
        streaming=settings.assistant_streaming,
    )

    app.state.catalog = catalog
    app.state.data_tools = data_tools
    app.state.chat_service = chat_service
    app.state.chat_client = ChatClient(chat_service)
    logger.info(
        "Data Copilot API started", extra={"model": settings.assistant_model},
    )
    try:
        yield
    finally:
        logger.info("Data Copilot API shutting down")
        await chat_service.shutdown()
        await db.dispose()


app = FastAPI(
    title="Data Copilot API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(chat.router)
app.include_router(schema.router)

register_error_handlers(app)
