"""Access logging middleware.

This middleware is the HTTP access-log layer the request binding builds on:
- Extracts the request ID from the configured header, or generates one
- Creates a per-request child logger of the module's root logger
- Attaches it to ``request.state`` (``log``, ``all_logs``, ``response``)
- Logs request completion with status code and duration, including any
  error captured by LoggerErrorRoute
- Includes the request ID in response headers

Request State Convention:
    request.state.log                  latest request logger
    request.state.all_logs             every request logger, oldest first
    request.state.response.log         response logger (completion record)
    request.state.response.all_logs    every response logger, oldest first
    request.state.response.err         exception captured for this request

Usage:
    Installed by ``LoggerModule.install``; not added by hand.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from scopedlog.config.logger_params import TransportOptions
from scopedlog.infrastructure.observability.request_id import resolve_request_id
from scopedlog.infrastructure.observability.response_logger import ResponseLogger

if TYPE_CHECKING:
    from scopedlog.api.module import LoggerModule


@dataclass(eq=False)
class OutgoingResponse:
    """Response-side logging state of one request.

    Attributes:
        log: Response logger the completion record is emitted through.
        all_logs: Every response logger created for the request.
        status_code: Final status code, once known.
        err: Exception captured while handling the request.
    """

    log: ResponseLogger
    all_logs: list[ResponseLogger] = field(default_factory=list)
    status_code: int | None = None
    err: BaseException | None = None


def _request_bindings(request: Request, request_id: str, options: TransportOptions) -> dict[str, Any]:
    """Fields bound to every record of the request."""
    if options.quiet_req_logger:
        return {options.attribute_key("reqId"): request_id}

    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return {
        options.attribute_key("req"): {
            "id": request_id,
            "method": request.method,
            "url": url,
            "remote_address": request.client.host if request.client else None,
            "remote_port": request.client.port if request.client else None,
        }
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Middleware creating per-request loggers and logging completion.

    This middleware:
    1. Extracts or generates the request ID
    2. Derives a request logger from the module's root logger
    3. Publishes it on request.state for the binding middleware
    4. Logs completion (status, duration, error) through the response logger
    5. Adds the request ID to response headers

    In reuse mode (an upstream layer already provides loggers) and for
    routes outside the module's selection, requests pass through untouched.
    """

    def __init__(self, app: Callable, module: LoggerModule) -> None:
        """Initialize AccessLogMiddleware.

        Args:
            app: The ASGI app to wrap.
            module: Logger module providing params and the root logger.
        """
        super().__init__(app)
        self._module = module

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with a request logger and completion logging.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response with the request ID header added.
        """
        params = self._module.params
        if params.reuse_existing_logger or not self._module.routes.applies_to(
            request.method, request.url.path
        ):
            return await call_next(request)

        options = params.transport
        request_id = resolve_request_id(request.headers, options.request_id_header)

        log = self._module.root.with_fields(_request_bindings(request, request_id, options))
        state = request.state
        state.log = log
        state.all_logs = [*getattr(state, "all_logs", []), log]

        previous = getattr(state, "response", None)
        response_log = ResponseLogger(log)
        outgoing = OutgoingResponse(
            log=response_log,
            all_logs=[*getattr(previous, "all_logs", []), response_log],
        )
        state.response = outgoing

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            if outgoing.err is None:
                outgoing.err = exc
            outgoing.status_code = 500
            self._log_completion(outgoing, options, start_time)

            # Re-raise to let error handlers deal with it
            raise

        outgoing.status_code = response.status_code
        self._log_completion(outgoing, options, start_time)

        response.headers[options.request_id_header] = request_id
        return response

    def _log_completion(
        self, outgoing: OutgoingResponse, options: TransportOptions, start_time: float
    ) -> None:
        if not options.auto_logging:
            return

        duration_ms = (time.perf_counter() - start_time) * 1000
        fields: dict[str, Any] = {
            options.attribute_key("res"): {"status_code": outgoing.status_code},
            options.attribute_key("responseTime"): round(duration_ms, 2),
        }

        status_code = outgoing.status_code or 0
        if outgoing.err is not None or status_code >= 500:
            if outgoing.err is not None:
                fields[options.attribute_key("err")] = outgoing.err
            outgoing.log.error(fields, "request errored")
        else:
            outgoing.log.info(fields, "request completed")
