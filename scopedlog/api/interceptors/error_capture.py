"""Error capture for completion logging.

Exceptions raised by a route handler are usually turned into a response by
FastAPI exception handlers before the access-log layer sees anything, so
the completion record would only show a status code. LoggerErrorRoute
records the exception on the request's outgoing response state first and
then re-raises it unchanged, so exception handlers still run.

Usage:
    router = APIRouter(route_class=LoggerErrorRoute)

    # or for every route of an application
    app.router.route_class = LoggerErrorRoute
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import Response

ERROR_ATTRIBUTE = "err"
# Adapters wrapping the real response object expose it under this name
RAW_RESPONSE_ATTRIBUTE = "raw"


def attach_error(response: Any, error: BaseException) -> None:
    """Record ``error`` on a response object.

    Args:
        response: The response object, or a wrapper exposing it as ``raw``.
        error: The exception to record.
    """
    target = getattr(response, RAW_RESPONSE_ATTRIBUTE, None)
    if target is None:
        target = response
    setattr(target, ERROR_ATTRIBUTE, error)


class LoggerErrorRoute(APIRoute):
    """APIRoute that records escaping exceptions for completion logging."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def capture_errors(request: Request) -> Response:
            try:
                return await handler(request)
            except Exception as exc:
                response = getattr(request.state, "response", None)
                if response is not None:
                    attach_error(response, exc)
                raise

        return capture_errors
