"""Entity package: Libro."""

from .entity import Libro, LibroData
from .gateway import LibroGateway
from .table import LibroTable
from .validation import validate_libro_payload

__all__ = [
    "Libro",
    "LibroData",
    "LibroGateway",
    "LibroTable",
    "validate_libro_payload",
]
