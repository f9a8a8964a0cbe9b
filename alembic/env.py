"""Alembic environment — migrations for the Data Copilot schema.

Invariants:
    - The database URL comes from Settings, the same source the app uses,
      so DATABASE_URL (and its postgresql:// rewrite) applies to migrations too
    - target_metadata is Base.metadata with every model imported: autogenerate
      sees the business tables and tool_calls
    - Online runs use an async engine with NullPool (one connection, then disposed)

Design Decisions:
    - SQLite connections render batch operations: ALTER TABLE there is limited
    - compare_type on: column type changes show up in autogenerate diffs
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from data_copilot.config import Settings
from data_copilot.db.base import Base
import data_copilot.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

DATABASE_URL = Settings().database_url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=DATABASE_URL.startswith("sqlite"),
        **kwargs,
    )


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    engine = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    # Emits SQL to stdout instead of executing it
    _configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_migrate_online())
