"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.infrastructure.persistence.database import check_database
from app.schemas.health import HealthResponse, ReadinessErrorResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> HealthResponse | JSONResponse:
    """Return 200 when the workflow store is reachable; 503 otherwise."""
    reason = await check_database()
    if reason is None:
        return HealthResponse(version=get_settings().app_version)
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(message=reason).model_dump(),
    )
