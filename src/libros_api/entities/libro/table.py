"""Libro database table model."""

from sqlmodel import Field, SQLModel


class LibroTable(SQLModel, table=True):
    """Database persistence model for libros.

    Storage assigns ``id`` through the auto-increment primary key. Field rules
    are enforced at the HTTP boundary, so columns only carry nullability.
    """

    __tablename__ = "libros"
    # SQLite otherwise hands out the id of a deleted last row again
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    titulo: str = Field(max_length=255)
    autor: str = Field(max_length=255)
    anio: int
