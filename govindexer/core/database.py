"""
Database configuration and session management.
Uses SQLAlchemy 2.0 with async support.
"""

from typing import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine
)

from .config import Settings, DatabaseConfig
from .exceptions import ConfigurationError
from .logging import get_logger

logger = get_logger(__name__)

# Dialects whose insert() construct supports ON CONFLICT
_UPSERT_INSERTS: dict[str, Callable] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def create_engine(config: Settings) -> AsyncEngine:
    """Create the async engine described by the given settings."""
    logger.info("Initializing database engine", environment=config.environment)
    return create_async_engine(
        DatabaseConfig.get_database_url(config.database_url, async_driver=True),
        **DatabaseConfig.get_engine_config(config),
        echo=config.debug
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def get_upsert_insert(dialect_name: str) -> Callable:
    """
    Return the dialect-specific insert() used for ON CONFLICT statements.

    Raises:
        ConfigurationError: if the dialect has no upsert support here
    """
    try:
        return _UPSERT_INSERTS[dialect_name]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported database dialect: {dialect_name}",
            {"dialect": dialect_name, "supported": sorted(_UPSERT_INSERTS)}
        ) from None


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession]
) -> AsyncGenerator[AsyncSession, None]:
    """
    Open a session whose work is committed as one transaction.

    Usage:
        async with session_scope(session_maker) as session:
            await session.execute(stmt)
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class DatabaseManager:
    """Database manager for administrative operations."""

    @staticmethod
    async def create_tables(engine: AsyncEngine) -> None:
        """Create all tables in the database."""
        from govindexer.models.base import BaseModel

        logger.info("Creating database tables")
        async with engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)
        logger.info("Database tables created")

    @staticmethod
    async def drop_tables(engine: AsyncEngine) -> None:
        """Drop all tables in the database."""
        from govindexer.models.base import BaseModel

        logger.warning("Dropping all database tables")
        async with engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)
        logger.info("Database tables dropped")

    @staticmethod
    async def health_check(engine: AsyncEngine) -> bool:
        """Check database connectivity."""
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False
