"""Database Session Manager — one pooled AsyncSession per request.

Invariants:
    - A session that sees an exception is rolled back before it is closed
    - Uniqueness races (IntegrityError) surface as NotAllowedError: a second
      writer lost to a key, which is a domain outcome and not an outage
    - Every other SQLAlchemy failure surfaces as DatabaseError (503, retryable)
    - HuddleErrors raised by concepts pass through untouched after rollback

Design Decisions:
    - Module-level db_manager, built in the FastAPI lifespan by init_db()
    - expire_on_commit=False: routes serialize ORM objects after commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from huddle.core.errors import DatabaseError, NotAllowedError

logger = logging.getLogger(__name__)

# Checked in order: most specific first
_UNAVAILABLE = (
    (OperationalError, "Database unreachable or timed out", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


class DatabaseSessionManager:
    """Owns the engine and hands out error-mapped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.info(f"Write lost a uniqueness race: {e.orig}")
            raise NotAllowedError(
                "The request conflicts with a concurrent change", "CONFLICT",
            ) from e
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _describe(e)
            logger.error(f"{message}: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError(message, operation) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a trivial query round-trips (readiness check)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def _describe(error: SQLAlchemyError) -> tuple[str, str]:
    for kind, message, operation in _UNAVAILABLE:
        if isinstance(error, kind):
            return message, operation
    return "Database operation failed", "unknown"


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
