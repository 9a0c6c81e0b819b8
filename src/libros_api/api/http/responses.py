"""Maps handler outcomes and domain errors onto HTTP status codes and bodies."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from libros_api.core.errors import (
    LibroApiError,
    NotFound,
    StorageFailure,
    ValidationFailure,
)

STATUS_BY_ERROR: dict[type[LibroApiError], int] = {
    ValidationFailure: 400,
    NotFound: 404,
    StorageFailure: 500,
}

GENERIC_STORAGE_DETAIL = "Internal storage error"

HTTP_ERROR_KINDS: dict[int, str] = {
    400: ValidationFailure.kind,
    404: NotFound.kind,
    405: "method_not_allowed",
    415: "unsupported_media_type",
}


class ErrorBody(BaseModel):
    """Shape of every error response."""

    error: str
    detail: str
    fields: list[str] | None = None


class Confirmation(BaseModel):
    message: str
    id: int


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorBody, "description": "Invalid input"},
    404: {"model": ErrorBody, "description": "Libro not found"},
    500: {"model": ErrorBody, "description": "Storage failure"},
}


def status_for(exc: LibroApiError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return 500


def error_body(exc: LibroApiError) -> dict[str, Any]:
    if isinstance(exc, StorageFailure):
        # Driver messages stay in the logs.
        return {"error": exc.kind, "detail": GENERIC_STORAGE_DETAIL}
    body: dict[str, Any] = {"error": exc.kind, "detail": exc.detail}
    if isinstance(exc, ValidationFailure):
        body["fields"] = exc.fields
    return body


def error_response(exc: LibroApiError) -> JSONResponse:
    return JSONResponse(status_code=status_for(exc), content=error_body(exc))


async def handle_libro_error(request: Request, exc: LibroApiError) -> JSONResponse:
    if isinstance(exc, StorageFailure):
        logger.opt(exception=exc.cause).bind(
            operation=exc.operation,
            error_type=type(exc.cause).__name__,
        ).error("storage.failure {} {}: {}", request.method, request.url.path, exc.cause)
    else:
        logger.bind(error=exc.kind).info("request.rejected: {}", exc.detail)
    return error_response(exc)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed JSON bodies and non-integer path ids are client errors too."""
    fields: list[str] = []
    for error in exc.errors():
        loc = [
            str(part)
            for part in error.get("loc", ())
            if isinstance(part, str) and part not in ("body", "path", "query")
        ]
        name = loc[0] if loc else "body"
        if name not in fields:
            fields.append(name)
    return error_response(ValidationFailure(fields))


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing and body parsing errors raised by Starlette itself."""
    body: dict[str, Any] = {
        "error": HTTP_ERROR_KINDS.get(exc.status_code, "http_error"),
        "detail": str(exc.detail),
    }
    if exc.status_code == 400:
        body["fields"] = ["body"]
    return JSONResponse(
        status_code=exc.status_code, content=body, headers=exc.headers
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibroApiError, handle_libro_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
