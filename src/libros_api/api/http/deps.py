"""FastAPI dependency implementations."""

from fastapi import Request

from libros_api.api.http.app_data import ApplicationDependencies
from libros_api.core.services.database.db_session import DbEngineService
from libros_api.entities.libro import LibroGateway


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbEngineService:
    """Get the shared database engine service."""
    return get_app_dependencies(request).database_service


def get_libro_gateway(request: Request) -> LibroGateway:
    """Get the libro storage gateway."""
    return get_app_dependencies(request).libro_gateway
