"""Async engine, session factory and storage error translation.

SQLAlchemy exceptions never leave the persistence layer: they become
``StorageError`` or, for constraint violations, ``InvalidStateError``.
Their text (SQL statement, bound parameters) stays in the server log.
"""

import logging
from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from holiday_api.config import settings
from holiday_api.core.exceptions import InvalidStateError, StorageError

logger = logging.getLogger(__name__)


def engine_options(url: str) -> dict:
    """Keyword arguments for ``create_async_engine`` suited to ``url``.

    An in-memory SQLite database lives in one connection, so every session
    has to share it.
    """
    if url.startswith("sqlite"):
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.rstrip("/").endswith(":") or ":memory:" in url:
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True}


engine = create_async_engine(settings.DATABASE_URL, echo=False, **engine_options(settings.DATABASE_URL))

async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy ORM models."""
    pass


@contextmanager
def translate_storage_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures inside the block as classified errors.

    The raised message names only ``operation``.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.error("%s: integrity violation", operation, exc_info=exc)
        raise InvalidStateError(f"{operation}: conflicting write") from exc
    except SQLAlchemyError as exc:
        logger.error("%s: database error", operation, exc_info=exc)
        raise StorageError(operation) from exc


async def get_db() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency that yields a session and commits on success."""
    async with async_session() as session:
        try:
            yield session
            with translate_storage_errors("Committing changes failed"):
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables that do not exist yet."""
    import holiday_api.models  # noqa: F401  (populates Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
