from .database.db_session import DbEngineService

__all__ = ["DbEngineService"]
