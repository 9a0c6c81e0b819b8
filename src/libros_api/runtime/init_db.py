"""Database initialization script."""

import asyncio

from libros_api.api.utils.app_startup import configure_logging
from libros_api.core.services.database.db_session import DbEngineService


async def init_db() -> None:
    """Create all database tables."""
    db_service = DbEngineService()
    try:
        await db_service.create_all()
    finally:
        await db_service.dispose()


def main() -> None:
    configure_logging()
    asyncio.run(init_db())


if __name__ == "__main__":
    main()
