"""
Connection provider: one lazily established, memoized async engine (connection pool)
per DatabasePool instance. Constructed in the app lifespan and injected into the repository.
"""

import asyncio
import logging

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from opportunity_api.core.config import Settings
from opportunity_api.core.errors import StoreConnectionError
from opportunity_api.db.tables import metadata

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabasePool:
    """Owns the pooled engine. First get_connection() connects; later calls reuse it."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> AsyncEngine:
        url = self.settings.database_url_resolved
        if self.settings.is_sqlite:
            engine = create_async_engine(url)
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            return engine
        return create_async_engine(
            url,
            pool_size=self.settings.DB_POOL_MAX,
            max_overflow=0,
            pool_recycle=self.settings.DB_POOL_IDLE_TIMEOUT,
            pool_pre_ping=True,
            connect_args=self.settings.connect_args,
        )

    async def get_connection(self) -> AsyncEngine:
        """
        Return the shared pooled engine, connecting on first use.
        A failed connect raises StoreConnectionError and leaves the pool unconnected,
        so the next caller tries again.
        """
        if self._engine is not None:
            return self._engine
        async with self._lock:
            if self._engine is not None:
                return self._engine
            engine = self._create_engine()
            try:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            except (SQLAlchemyError, OSError) as e:
                await engine.dispose()
                logger.error("Database connection failed: %s", e)
                raise StoreConnectionError(f"Database connection failed: {e}") from e
            logger.info("Connected to database %s", engine.url.render_as_string(hide_password=True))
            self._engine = engine
            return engine

    async def create_schema(self) -> None:
        """Create tables that do not exist yet."""
        engine = await self.get_connection()
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Database schema ensured")

    async def close(self) -> None:
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("Database pool closed")


def get_database(request: Request) -> DatabasePool:
    """Dependency: the DatabasePool created in the app lifespan."""
    return request.app.state.db
