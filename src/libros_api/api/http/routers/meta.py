"""Service-level routes: documentation redirect and table listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from libros_api.api.http.deps import get_libro_gateway
from libros_api.api.http.responses import ERROR_RESPONSES
from libros_api.entities.libro import LibroGateway

router = APIRouter()


@router.get("/", include_in_schema=False)
async def root(request: Request) -> RedirectResponse:
    return RedirectResponse(url=request.app.docs_url or "/docs")


@router.get(
    "/tables",
    response_model=list[str],
    tags=["meta"],
    summary="Listar las tablas de la base de datos",
    responses={500: ERROR_RESPONSES[500]},
)
async def list_tables(
    gateway: Annotated[LibroGateway, Depends(get_libro_gateway)],
) -> list[str]:
    return await gateway.list_tables()
