from dataclasses import dataclass

from libros_api.core.services.database.db_session import DbEngineService
from libros_api.entities.libro import LibroGateway


@dataclass
class ApplicationDependencies:
    database_service: DbEngineService
    libro_gateway: LibroGateway
