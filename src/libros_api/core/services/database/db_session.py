"""Async database engine and connection pool shared across the application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import StaticPool, inspect, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from libros_api.runtime.config.config_data import ConfigData, DatabaseConfig
from libros_api.runtime.context import get_config


class DbEngineService:
    def __init__(self, config: ConfigData | None = None, engine: AsyncEngine | None = None):
        """Initialize the shared async engine and its bounded connection pool."""
        main_config = config or get_config()
        self._db_config = main_config.database

        if engine is not None:
            self._engine = engine
            return

        logger.info(
            "Configuring database engine for environment: {}", main_config.app.environment
        )
        url = self._db_config.connection_url()
        engine_kwargs = self._get_engine_kwargs(self._db_config, url.database)
        logger.info("Initializing database engine for {}", self._db_config.safe_url)
        self._engine = create_async_engine(url, **engine_kwargs)

    @staticmethod
    def _get_engine_kwargs(db_config: DatabaseConfig, database: str | None) -> dict:
        """Pool and driver arguments for the configured backend."""
        if db_config.is_sqlite:
            connect_args = {"timeout": 20}
            if not database or database == ":memory:":
                # A private in-memory database lives and dies with its connection.
                return {"poolclass": StaticPool, "connect_args": connect_args}
        elif db_config.backend == "postgresql":
            connect_args = {"timeout": db_config.pool_timeout}
        else:
            connect_args = {"connect_timeout": db_config.pool_timeout}

        return {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
            "echo": False,
            "connect_args": connect_args,
        }

    @property
    def backend(self) -> str:
        return self._engine.dialect.name

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """Borrow one pooled connection inside a transaction.

        Commits when the block exits cleanly, rolls back otherwise, and always
        returns the connection to the pool.
        """
        async with self._engine.begin() as conn:
            yield conn

    async def verify_connection(self) -> None:
        """Run a trivial statement; raises the driver error when unreachable."""
        async with self.connection() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        from libros_api.entities.libro.table import LibroTable  # noqa: F401

        async with self.connection() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database initialized with tables.")

    async def table_names(self) -> list[str]:
        async with self.connection() as conn:
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    async def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            await self.verify_connection()
            return True
        except Exception as e:
            logger.bind(error_type=type(e).__name__).error(
                "Database health check failed: {}", e
            )
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Database connection pool closed.")
