"""Database Session Manager — async engine, scoped sessions with automatic rollback, health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions surfacing from a scoped session become DatabaseError
    - Pool sizing applies to server databases only (SQLite uses its own pool class)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - expire_on_commit=False: created records stay readable after commit in async context
    - session() is the per-call scoped data-access context handed to the data tools
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from data_copilot.core.errors import DatabaseError
from data_copilot.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the async engine and hands out short-lived scoped sessions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        engine: AsyncEngine | None = None,
    ):
        if engine is None:
            engine = _build_engine(database_url, pool_size, max_overflow)
        self.engine = engine
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error("DB integrity error: %s", e)
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error("DB operational error: %s", e)
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error("DB driver error: %s", e)
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("SQLAlchemy error: %s", e)
            raise DatabaseError("Database operation failed", "unknown") from e
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create every mapped table that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("DB health check failed: %s", e)
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def _build_engine(
    database_url: str, pool_size: int, max_overflow: int,
) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url)
    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_db_manager().session() as session:
        yield session
