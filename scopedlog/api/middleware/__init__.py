"""API middleware components."""

from scopedlog.api.middleware.access_log import AccessLogMiddleware, OutgoingResponse
from scopedlog.api.middleware.bind_logger import BindLoggerMiddleware, build_store
from scopedlog.api.middleware.routes import RoutePattern, RouteSelector

__all__: list[str] = [
    "AccessLogMiddleware",
    "BindLoggerMiddleware",
    "OutgoingResponse",
    "RoutePattern",
    "RouteSelector",
    "build_store",
]
