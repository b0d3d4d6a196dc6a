"""Async SQLAlchemy engine and session management.

``Database`` is constructed explicitly from settings and owned by the
application container; it is opened on startup and disposed on shutdown.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from crudapi.core.config import DatabaseSettings
from crudapi.infrastructure.database.base import Base

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, settings: DatabaseSettings, *, debug: bool = False) -> None:
        self._settings = settings
        self._debug = debug
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _build_engine(self) -> AsyncEngine:
        engine_kwargs: dict[str, Any] = {
            "echo": self._settings.echo or self._debug,
        }
        if self._settings.pool_size is not None:
            engine_kwargs["pool_size"] = self._settings.pool_size
        if self._settings.max_overflow is not None:
            engine_kwargs["max_overflow"] = self._settings.max_overflow
        return create_async_engine(self._settings.url, **engine_kwargs)

    async def connect(self) -> None:
        if self._engine is not None:
            return
        self._engine = self._build_engine()
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created for %s", self._engine.url.render_as_string(hide_password=True))

    async def create_all(self) -> None:
        """Create database tables in development mode (migrations preferred)."""
        # Import models so they register on the metadata.
        from crudapi.infrastructure.database import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("Database ping failed: %s", exc)
            return False
        return True

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield one session per unit of work: commit on success, roll back on error."""
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
