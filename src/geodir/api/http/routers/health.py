"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from src.geodir.api.http.app_data import ApplicationDependencies
from src.geodir.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe; does not check dependencies."""
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe. Returns 503 when the database is unreachable."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    db_healthy = await run_in_threadpool(app_deps.database_service.health_check)
    body = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": {
            "database": {"status": "healthy" if db_healthy else "unhealthy"},
            "location_provider": {
                "status": "configured" if config.location.api_key else "missing_api_key"
            },
        },
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
