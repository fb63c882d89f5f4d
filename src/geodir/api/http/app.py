"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse, PlainTextResponse

from src.geodir.api.http.app_data import ApplicationDependencies
from src.geodir.api.http.routers.health import router as health_router
from src.geodir.api.http.routers.users import router as users_router
from src.geodir.api.utils.app_startup import configure_logging
from src.geodir.core.exceptions import (
    ConcurrentUpdateError,
    GeoDirectoryError,
    InputValidationError,
    ResolutionFailedError,
    StoreFailureError,
    UserNotFoundError,
)
from src.geodir.core.services import (
    DbManageService,
    DbSessionService,
    OpenWeatherLocationResolver,
)
from src.geodir.runtime.context import get_config

__all__ = ["app", "create_app", "startup", "shutdown"]

# Most specific first; the first isinstance match wins
ERROR_STATUS_CODES: list[tuple[type[GeoDirectoryError], int]] = [
    (InputValidationError, 400),
    (UserNotFoundError, 404),
    (ConcurrentUpdateError, 409),
    (ResolutionFailedError, 500),
    (StoreFailureError, 500),
    (GeoDirectoryError, 500),
]


def status_code_for(exc: GeoDirectoryError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def handle_domain_error(request: Request, exc: GeoDirectoryError) -> JSONResponse:
    status_code = status_code_for(exc)
    log = logger.bind(status_code=status_code, error_type=type(exc).__name__)
    if status_code >= 500:
        log.error("request.failed: {}", exc.message)
    else:
        log.info("request.rejected: {}", exc.message)
    return _error_response(request, status_code, exc.message)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "Invalid request body" + (f" ({'; '.join(problems)})" if problems else "")
    logger.bind(status_code=400, error_type=type(exc).__name__).info("request.rejected: {}", message)
    return _error_response(request, 400, message)


def build_dependencies() -> ApplicationDependencies:
    """Construct the process-wide services from the current configuration."""
    config = get_config()
    database_service = DbSessionService()
    if config.database.create_tables:
        DbManageService(database_service.engine).create_all()

    if not config.location.api_key:
        logger.warning("No location provider API key configured; lookups will be rejected")

    return ApplicationDependencies(
        database_service=database_service,
        location_resolver=OpenWeatherLocationResolver(config.location),
    )


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies()
        app.state.owns_dependencies = True


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    if getattr(app.state, "owns_dependencies", False):
        app.state.app_dependencies.database_service.dispose()
        app.state.app_dependencies = None
        app.state.owns_dependencies = False


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        dependencies: Pre-built services. When omitted they are created from
            configuration at startup and disposed at shutdown.
    """
    config = get_config()
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app)
        try:
            yield
        finally:
            await shutdown(app)

    app = FastAPI(
        title="Geo User Directory",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )
    app.state.app_dependencies = dependencies
    app.state.owns_dependencies = False

    # --- CORS configuration ---
    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

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
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={"error": "Internal Server Error"},
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")
            response.headers.setdefault("X-Request-ID", request_id)
            return response

    # --- Error mapping ---
    app.add_exception_handler(GeoDirectoryError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    # --- Router registration ---
    app.include_router(users_router)
    app.include_router(health_router)

    welcome_message = f"Welcome to the {config.app.company_name} interview!"

    @app.get("/", response_class=PlainTextResponse)
    async def welcome() -> str:
        """Welcome message naming the company."""
        return welcome_message

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # Access logging is done by the middleware
    )
