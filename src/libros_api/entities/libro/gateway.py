"""Storage gateway for the libros table.

Every operation borrows exactly one pooled connection for exactly one bound
statement; driver errors leave this module as ``StorageFailure``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from libros_api.core.errors import StorageFailure
from libros_api.core.services.database.db_session import DbEngineService
from libros_api.entities.libro.entity import Libro, LibroData
from libros_api.entities.libro.table import LibroTable

_table = LibroTable.__table__


class LibroGateway:
    """Data-access layer for libros."""

    def __init__(self, db: DbEngineService) -> None:
        self._db = db

    @asynccontextmanager
    async def _statement(self, operation: str) -> AsyncIterator[AsyncConnection]:
        try:
            async with self._db.connection() as conn:
                yield conn
        except (SQLAlchemyError, OSError, OverflowError) as exc:
            raise StorageFailure(operation, exc) from exc

    async def list_all(self) -> list[Libro]:
        statement = select(_table).order_by(_table.c.id)
        async with self._statement("list_all") as conn:
            result = await conn.execute(statement)
            rows = result.mappings().all()
        return [Libro.model_validate(dict(row)) for row in rows]

    async def get_by_id(self, libro_id: int) -> Libro | None:
        statement = select(_table).where(_table.c.id == libro_id)
        async with self._statement("get_by_id") as conn:
            result = await conn.execute(statement)
            row = result.mappings().first()
        return Libro.model_validate(dict(row)) if row is not None else None

    async def create(self, data: LibroData) -> Libro:
        statement = insert(_table).values(**data.model_dump())
        async with self._statement("create") as conn:
            result = await conn.execute(statement)
            libro_id = result.inserted_primary_key[0]
        logger.info("Created libro #{}", libro_id)
        return Libro.from_data(libro_id, data)

    async def update(self, libro_id: int, data: LibroData) -> int:
        """Overwrite all fields of a libro; returns the number of rows matched."""
        statement = (
            update(_table).where(_table.c.id == libro_id).values(**data.model_dump())
        )
        async with self._statement("update") as conn:
            result = await conn.execute(statement)
            affected = result.rowcount
        logger.info("Updated libro #{} ({} row(s))", libro_id, affected)
        return affected

    async def delete(self, libro_id: int) -> int:
        """Remove a libro; returns the number of rows deleted."""
        statement = delete(_table).where(_table.c.id == libro_id)
        async with self._statement("delete") as conn:
            result = await conn.execute(statement)
            affected = result.rowcount
        logger.info("Deleted libro #{} ({} row(s))", libro_id, affected)
        return affected

    async def list_tables(self) -> list[str]:
        try:
            return await self._db.table_names()
        except (SQLAlchemyError, OSError, OverflowError) as exc:
            raise StorageFailure("list_tables", exc) from exc
