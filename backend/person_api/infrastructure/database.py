"""Database Session Manager — async connection pool, rollback, schema setup, health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy exceptions escaping a session are mapped to DatabaseError
      (the store classifies integrity errors itself; this is the backstop)
    - The app never serves traffic without the unique email index in place

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - ensure_person_schema creates-then-verifies: a pre-existing table without the
      index gets one, and duplicate data makes startup fail loudly
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import SQLAlchemyError

from person_api.core.errors import DatabaseError, SchemaSetupError
from person_api.db.base import Base
from person_api.models.person import Person as PersonModel

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True, "pool_recycle": 3600}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)
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
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("session") from e
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

    async def close(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session


# ─── Schema setup ───────────────────────────────────────────────

def _has_unique_email(connection: Connection) -> bool:
    inspector = inspect(connection)
    table = PersonModel.__tablename__
    for index in inspector.get_indexes(table):
        if index.get("unique") and index["column_names"] == ["email"]:
            return True
    for constraint in inspector.get_unique_constraints(table):
        if constraint["column_names"] == ["email"]:
            return True
    return False


def _create_person_schema(connection: Connection) -> None:
    Base.metadata.create_all(connection, tables=[PersonModel.__table__])
    for index in PersonModel.__table__.indexes:
        index.create(connection, checkfirst=True)
    if not _has_unique_email(connection):
        raise SchemaSetupError("Unique index on people.email is not active")


async def ensure_person_schema(engine: AsyncEngine) -> None:
    """Create the people table and its unique email index; fail if either is missing."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(_create_person_schema)
    except SchemaSetupError:
        logger.critical("Email uniqueness constraint missing after setup")
        raise
    except SQLAlchemyError as e:
        logger.critical(f"Failed to establish email uniqueness constraint: {e}")
        raise SchemaSetupError(
            "Could not establish unique index on people.email",
        ) from e
    logger.info("Email uniqueness constraint active")
