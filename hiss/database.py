"""
HISS Backend — Database Session Management
===========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with a small bounded pool, provides a session
       dependency that commits on success and rolls back on error.
Who:   Route handlers receive sessions via FastAPI's dependency injection and
       pass them into repository constructors.

Connection Pooling Strategy (PostgreSQL):
    pool_size=3, max_overflow=0:  at most three statements in flight
    pool_timeout:                  bounded wait for a connection, then 503
    command_timeout (asyncpg):     bounded statement runtime
    isolation_level:               REPEATABLE READ, so the three fan-out
                                   reads of a report see one snapshot
"""

import logging
from contextlib import contextmanager
from typing import Any, AsyncGenerator, Dict, Iterator

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from hiss.config import Settings, settings
from hiss.exceptions import StoreError, StoreUnavailableError

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
def engine_options(config: Settings) -> Dict[str, Any]:
    """
    Build create_async_engine() keyword arguments for the configured dialect.

    SQLite (aiosqlite) uses SQLAlchemy's default pool for the URL and does not
    accept pool sizing, asyncpg timeouts or REPEATABLE READ, so those options
    are only applied to server databases.
    """
    options: Dict[str, Any] = {
        # SQL logging is noisy; only useful during development
        "echo": config.log_level == "DEBUG",
    }
    if config.is_sqlite:
        return options

    options.update(
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=config.db_pool_timeout,
        pool_pre_ping=config.db_pool_pre_ping,
        pool_recycle=3600,
        isolation_level=config.db_isolation_level,
    )
    if config.database_url.startswith("postgresql+asyncpg"):
        options["connect_args"] = {"command_timeout": config.db_statement_timeout}
    return options


def build_engine(config: Settings) -> AsyncEngine:
    return create_async_engine(config.database_url, **engine_options(config))


engine = build_engine(settings)

# expire_on_commit=False: rows stay readable after the dependency commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object so create_schema() and the test suite
    can build every table at once.
    """
    pass


# ── Error Translation ─────────────────────────────────────────────────────
def translate_store_error(error: sa_exc.SQLAlchemyError, operation: str) -> StoreError:
    """
    Map a SQLAlchemy failure onto the application's store errors.

    sqlalchemy.exc.TimeoutError is raised by the pool when no connection was
    returned within pool_timeout; everything else is a generic store failure.
    """
    context = {"operation": operation, "error_type": type(error).__name__}
    if isinstance(error, sa_exc.TimeoutError):
        logger.error("Connection pool exhausted during %s", operation)
        return StoreUnavailableError(context=context)
    logger.error("Database error during %s: %s", operation, str(error), exc_info=True)
    return StoreError(context=context)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures inside the block as StoreError."""
    try:
        yield
    except sa_exc.SQLAlchemyError as e:
        raise translate_store_error(e, operation) from e


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    The teardown runs after the response has been sent, so writes do not
    rely on it: FeatureService commits before returning its SaveResult and
    a failed commit still becomes a 500. For reads the commit here only
    ends the transaction.

    Example usage in a route:
        @router.get("/features/for/{report_uid}")
        async def features_for(report_uid: int, db: AsyncSession = Depends(get_db_session)):
            return await ReportRepository(db).features_for(report_uid)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except sa_exc.SQLAlchemyError as e:
            await session.rollback()
            raise translate_store_error(e, "commit") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_schema(target: AsyncEngine = engine) -> None:
    """
    Create any missing tables from the ORM metadata.

    When:  Startup with DB_CREATE_SCHEMA=true, and the test suite.
    """
    # Models register themselves on Base.metadata when imported
    from hiss.models import feature, radiology  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool during shutdown."""
    await engine.dispose()
