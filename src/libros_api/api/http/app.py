"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from libros_api.api.http.app_data import ApplicationDependencies
from libros_api.api.http.responses import register_exception_handlers
from libros_api.api.http.routers.health import router as health_router
from libros_api.api.http.routers.libro import router as libro_router
from libros_api.api.http.routers.meta import router as meta_router
from libros_api.api.utils.app_startup import configure_logging
from libros_api.core.errors import StartupError
from libros_api.core.services.database.db_session import DbEngineService
from libros_api.entities.libro import LibroGateway
from libros_api.runtime.config.config_data import ConfigData, DocsConfig
from libros_api.runtime.context import get_config

DEFAULT_DESCRIPTION = "CRUD de libros sobre una tabla relacional."


def load_description(docs: DocsConfig) -> str:
    """Use the project README as the API description when it is available."""
    readme = Path(docs.readme_path)
    if readme.is_file():
        return readme.read_text(encoding="utf-8")
    return DEFAULT_DESCRIPTION


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end {} {}", response.status_code, request.url.path)

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Lifecycle hooks ---
async def startup(
    app: FastAPI, database_service: DbEngineService | None = None
) -> None:
    config: ConfigData = app.state.config
    logger.info("Starting up application in {} environment", config.app.environment)

    if database_service is None:
        try:
            database_service = DbEngineService(config)
        except ValueError as exc:
            logger.error("Database configuration error: {}", exc)
            raise StartupError(str(exc)) from exc

    connected = True
    try:
        await database_service.verify_connection()
        logger.info("Database connection established")
    except (SQLAlchemyError, OSError) as exc:
        connected = False
        logger.error("Database connection failed: {}", exc)
        if config.database.fail_fast:
            await database_service.dispose()
            raise StartupError("Initial database connection failed") from exc
        logger.warning("Continuing without a verified database connection")

    if connected and config.database.create_schema:
        await database_service.create_all()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        libro_gateway=LibroGateway(database_service),
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        await app_dependencies.database_service.dispose()


def create_app(
    config: ConfigData | None = None,
    database_service: DbEngineService | None = None,
) -> FastAPI:
    """Build the application.

    ``database_service`` replaces the engine built from configuration, which is
    how tests point the app at an in-memory database.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, database_service)
        try:
            yield
        finally:
            await shutdown(app)

    docs = config.docs
    app = FastAPI(
        title=docs.title,
        version=docs.version,
        description=load_description(docs),
        license_info={"name": docs.license_name, "url": docs.license_url},
        contact={"name": docs.contact_name, "url": docs.contact_url},
        servers=[{"url": config.app.base_url, "description": "Servidor local"}],
        docs_url=docs.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    register_exception_handlers(app)

    app.include_router(meta_router)
    app.include_router(libro_router)
    app.include_router(health_router)

    return app


configure_logging()
app = create_app()

__all__ = ["app", "create_app", "startup", "shutdown"]


def main() -> None:
    import uvicorn

    config = get_config()
    uvicorn.run(
        app,
        host=config.app.host,
        port=config.app.port,
        access_log=False,  # request logging middleware covers access logs
    )


if __name__ == "__main__":
    main()
