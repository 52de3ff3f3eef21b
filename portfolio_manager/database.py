"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from portfolio_manager.config import Settings, get_settings
from portfolio_manager.kernel.errors import UnauthorizedError
from portfolio_manager.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign keys (cascading deletes) + WAL on every new SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with the options suited to the backend."""
    if database_url.startswith("sqlite"):
        in_memory = ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:")
        # In-memory databases live on a single connection; file databases get
        # one connection per session to avoid "SQL statements in progress".
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if in_memory else NullPool,
        )
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
        return engine

    # PostgreSQL settings with connection pooling
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


settings = get_settings()

engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory
async_session_maker = build_session_maker(engine)


@asynccontextmanager
async def session_scope(
    session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncIterator[AsyncSession]:
    """
    Provide a transactional scope around one call into the core.

    Commits on success and rolls back on failure. Authorization always runs
    before any write, so when an UnauthorizedError escapes the only pending
    change is the access-denied audit row; that row is committed so denials
    stay on the audit trail.
    """
    maker = session_maker or async_session_maker
    async with maker() as session:
        try:
            yield session
            await session.commit()
        except UnauthorizedError:
            await session.commit()
            raise
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables."""
    # Import Base from kernel models to ensure all models are registered
    from portfolio_manager.kernel.models import Base

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")


async def close_db(bind: Optional[AsyncEngine] = None) -> None:
    """Close database connections."""
    await (bind or engine).dispose()


async def startup(
    bind: Optional[AsyncEngine] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Process startup: configure logging first, then create tables.

    Whatever drives the core (a web app lifespan, a worker, a script)
    calls this once before opening units of work, and shutdown() on exit.
    """
    settings = settings or get_settings()
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
        audit_logger_name=settings.audit_logger_name,
        audit_level=settings.audit_log_level,
    )
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db(bind)


async def shutdown(bind: Optional[AsyncEngine] = None) -> None:
    logger.info("Shutting down")
    await close_db(bind)
    logger.info("Database connections closed")
