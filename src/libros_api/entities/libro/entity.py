"""Entity: Libro."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_INTEGER_RE = re.compile(r"[+-]?\d+")


class LibroData(BaseModel):
    """Normalized, validated fields of a libro (everything but the id)."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    titulo: str = Field(min_length=1, description="Título del libro")
    autor: str = Field(min_length=1, description="Autor del libro")
    anio: int = Field(description="Año de publicación del libro")

    @field_validator("anio", mode="before")
    @classmethod
    def _parse_anio(cls, value: Any) -> int:
        """Accept JSON integers and decimal digit strings, nothing else."""
        if isinstance(value, bool):
            raise ValueError("anio must be an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
            return int(value.strip())
        raise ValueError("anio must be an integer")


class Libro(BaseModel):
    """A persisted libro as returned to clients."""

    id: int = Field(description="ID del libro")
    titulo: str = Field(description="Título del libro")
    autor: str = Field(description="Autor del libro")
    anio: int = Field(description="Año de publicación del libro")

    @classmethod
    def from_data(cls, libro_id: int, data: LibroData) -> "Libro":
        return cls(id=libro_id, **data.model_dump())
