"""Health check endpoint."""

from fastapi import APIRouter

from scopedlog import __version__
from scopedlog.api.dependencies.logger import request_logger
from scopedlog.api.interceptors.error_capture import LoggerErrorRoute
from scopedlog.api.models.health import HealthResponse
from scopedlog.api.routes import registry
from scopedlog.application.services.scoped_logger import ScopedLogger

router = APIRouter(prefix="/v1", tags=["health"], route_class=LoggerErrorRoute)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    log: ScopedLogger = request_logger("HealthRoutes", registry),
) -> HealthResponse:
    """Return health status.

    Returns:
        Health status with 200 OK.
    """
    log.debug("health check")
    return HealthResponse(status="healthy", version=__version__)
