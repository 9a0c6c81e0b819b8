"""Libro API router with CRUD operations.

Each handler validates first, then issues exactly one storage statement.
Domain errors propagate to the handlers installed by
``libros_api.api.http.responses``.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path
from starlette import status

from libros_api.api.http.deps import get_libro_gateway
from libros_api.api.http.responses import ERROR_RESPONSES, Confirmation
from libros_api.core.errors import NotFound
from libros_api.entities.libro import Libro, LibroData, LibroGateway, validate_libro_payload

router = APIRouter(prefix="/libro", tags=["Libros"], responses={500: ERROR_RESPONSES[500]})

_LIBRO_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": LibroData.model_json_schema()}},
    }
}

Payload = Annotated[
    Any,
    Body(examples=[{"titulo": "Dune", "autor": "Herbert", "anio": 1965}]),
]
# Widest integer every supported backend can bind
MAX_ID = 2**63 - 1

LibroId = Annotated[int, Path(ge=-MAX_ID - 1, le=MAX_ID, description="ID del libro")]
Gateway = Annotated[LibroGateway, Depends(get_libro_gateway)]


@router.get("", response_model=list[Libro], summary="Obtener todos los libros")
async def list_libros(gateway: Gateway) -> list[Libro]:
    """List all libros."""
    return await gateway.list_all()


@router.get(
    "/{libro_id}",
    response_model=Libro,
    summary="Obtener un libro",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
async def get_libro(libro_id: LibroId, gateway: Gateway) -> Libro:
    """Get a libro by ID."""
    libro = await gateway.get_by_id(libro_id)
    if libro is None:
        raise NotFound(libro_id)
    return libro


@router.post(
    "",
    response_model=Libro,
    status_code=status.HTTP_201_CREATED,
    summary="Crear un nuevo libro",
    responses={400: ERROR_RESPONSES[400]},
    openapi_extra=_LIBRO_BODY,
)
async def create_libro(payload: Payload, gateway: Gateway) -> Libro:
    """Create a new libro; storage assigns its id."""
    data = validate_libro_payload(payload)
    return await gateway.create(data)


@router.put(
    "/{libro_id}",
    response_model=Libro,
    summary="Actualizar un libro",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
    openapi_extra=_LIBRO_BODY,
)
async def update_libro(libro_id: LibroId, payload: Payload, gateway: Gateway) -> Libro:
    """Overwrite every field of a libro."""
    data = validate_libro_payload(payload, libro_id)
    if await gateway.update(libro_id, data) == 0:
        raise NotFound(libro_id)
    return Libro.from_data(libro_id, data)


@router.delete(
    "/{libro_id}",
    response_model=Confirmation,
    summary="Eliminar un libro",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
async def delete_libro(libro_id: LibroId, gateway: Gateway) -> Confirmation:
    """Delete a libro."""
    if await gateway.delete(libro_id) == 0:
        raise NotFound(libro_id)
    return Confirmation(message="Libro eliminado", id=libro_id)
