"""Entities organized by business concept.

Each entity package keeps its domain model (entity.py), persistence table
(table.py), input validation and storage gateway side by side.
"""

from .libro import Libro, LibroData, LibroGateway, LibroTable

__all__ = ["Libro", "LibroData", "LibroGateway", "LibroTable"]
