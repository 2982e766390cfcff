"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to StoreError (core/errors.py)
    - File databases get a sized pool; in-memory databases share one connection

Design Decisions:
    - Manager is owned by whoever creates it (CLI or test fixture) and reaches
      routes through app.state, so several independent stores can coexist
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from shaker.core.errors import StoreError

logger = logging.getLogger(__name__)


def _is_memory_url(database_url: str) -> bool:
    return ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:")


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 5, max_overflow: int = 10,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo}
        if not _is_memory_url(database_url):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )
        self.database_url = database_url
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}", extra={"operation": "commit"})
            raise StoreError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}", extra={"operation": "execute"})
            raise StoreError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}", extra={"operation": "query"})
            raise StoreError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}", extra={"operation": "unknown"})
            raise StoreError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency returning the manager owned by the running app."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    return manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_db_manager(request).session() as session:
        yield session
