"""
SQLAlchemy async engine and session management

This module provides:
1. Base: declarative base shared by every projection model
2. Database: engine + session factory for dependency injection
3. create_db_and_tables: schema bootstrap for local runs and tests

The registration service only reads projections, so a single engine is
enough. Pool settings apply to server databases only (SQLite uses a static
pool and rejects them).
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith('sqlite'):
        return {}
    return {
        'pool_size': settings.DB_POOL_SIZE,
        'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
        'pool_timeout': settings.DB_POOL_TIMEOUT,
        'pool_recycle': settings.DB_POOL_RECYCLE,
        'pool_pre_ping': settings.DB_POOL_PRE_PING,
    }


class Database:
    """
    Database class for dependency injection pattern

    The engine is created lazily on first use so that building the container
    never opens a connection.
    """

    def __init__(self, *, url: Optional[str] = None) -> None:
        self._url = url or settings.DATABASE_URL_ASYNC
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            Logger.base.info(f'🔗 [DB] Creating engine for {self._url.split("@")[-1]}')
            self._engine = create_async_engine(
                self._url, echo=False, future=True, **_engine_options(self._url)
            )
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Note: Automatically handles rollback on exception
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False
            )
        async with self._session_factory() as session:
            yield session

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


async def create_db_and_tables(database: Database) -> None:
    """Create projection tables if they don't exist"""
    # Registers every model on Base.metadata
    import src.service.registration.driven_adapter.model  # noqa: F401

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    Logger.base.info('🗄️  [DB] Projection tables ready')
