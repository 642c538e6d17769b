# Copyright (C) 2010-2026 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ...config import DatabaseSettings, config

# Get database settings from main config
db_config = config.database

# Validate database URL
if not db_config.url:
    raise ValueError("DATABASE__URL must be configured in environment or .env file")


def engine_options(settings: DatabaseSettings) -> Dict[str, Any]:
    """
    Keyword arguments for create_async_engine.
    SQLite connections get a busy timeout so concurrent reconciles wait on the cache file lock.
    """
    options: Dict[str, Any] = {"echo": settings.echo, "pool_pre_ping": True}
    if settings.url and settings.url.startswith("sqlite"):
        options["connect_args"] = {"timeout": settings.busy_timeout}
    return options


# Create async engine using settings from main config
engine = create_async_engine(db_config.url, **engine_options(db_config))

# Create session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)

# Base class for SQLAlchemy models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI to get database session.

    Usage in FastAPI endpoints:
        async def my_endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """
    Initialize database - create all tables.
    Should be called on application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """
    Close database connections.
    Should be called on application shutdown.
    """
    await engine.dispose()
