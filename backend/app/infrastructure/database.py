"""Database Session Manager — owns the async engine and hands out units of work.

Invariants:
    - A session that raises is rolled back before the error leaves the manager
    - unit_of_work() commits exactly once, on clean exit; any error rolls back everything
    - Driver failures leave as ShelterError: IntegrityError → ConflictError (final),
      everything else → DatabaseError (Unavailable, safe to retry the whole unit)
    - Consumers read `database.db_manager` at call time, never bind it at import,
      so tests can swap the manager

Design Decisions:
    - One process-wide manager created in the FastAPI lifespan (ADR: no import side effects)
    - expire_on_commit=False: snapshots are taken after flush and read after commit
    - Pool sizing applies to server databases only; SQLite keeps its dialect default pool
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import ConflictError, DatabaseError, ShelterError

logger = logging.getLogger(__name__)


def _translate(exc: SQLAlchemyError) -> ShelterError:
    """Map a driver failure onto the adoption error hierarchy."""
    if isinstance(exc, IntegrityError):
        return ConflictError(
            "Integrity constraint violated", "INTEGRITY_CONFLICT",
        )
    if isinstance(exc, OperationalError):
        return DatabaseError("connection lost or database busy", "execute")
    return DatabaseError("statement failed", "query")


class DatabaseSessionManager:
    """Engine plus session factory for one database URL."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Plain session; rolled back and translated on driver failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = _translate(e)
            logger.error(
                f"Database failure ({type(e).__name__}): {e}",
                extra={"error_code": error.code},
            )
            raise error from e
        finally:
            await session.close()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncGenerator[AsyncSession, None]:
        """One transaction: commit on clean exit, rollback on any error."""
        async with self.session() as session:
            async with session.begin():
                yield session

    async def health_check(self) -> bool:
        """True when a trivial query round-trips (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Readiness query failed: {e}")
            return False
        return True


# Process-wide manager, created in the FastAPI lifespan
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency for writers that open their own unit of work."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: read-only session for reporting endpoints."""
    async with get_db_manager().session() as session:
        yield session
