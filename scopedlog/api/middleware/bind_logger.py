"""Request binding middleware.

Runs once per request, after the access-log layer. It picks the logger(s)
the upstream layer attached to ``request.state``, wraps them in a Store and
runs the rest of the request pipeline with that Store active, so every
``Logger``/``ScopedLogger`` call made while handling the request resolves
to the request's logger.

Selection rules:
- Normal mode: the most recently created logger wins (last of
  ``request.state.all_logs``), so a child created by a nested access-log
  layer supersedes its parent.
- Reuse mode: ``request.state.log`` as provided upstream is authoritative.
- The response logger is only picked when response assignment is enabled,
  with the same rules applied to ``request.state.response``.

This middleware emits no records itself.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from scopedlog.application.observability.context import arun
from scopedlog.application.observability.root_logger import get_root_logger
from scopedlog.domain.models.store import Store

if TYPE_CHECKING:
    from scopedlog.api.module import LoggerModule


def build_store(state: Any, *, reuse_existing: bool, assign_response: bool) -> Store:
    """Build the Store for one request from its state.

    Args:
        state: ``request.state`` (any attribute container).
        reuse_existing: Trust ``state.log`` and ignore ``all_logs``.
        assign_response: Also select a response logger.

    Returns:
        The Store. Falls back to the root logger when upstream attached none.
    """
    log = getattr(state, "log", None)
    response = getattr(state, "response", None)
    response_log = getattr(response, "log", None) if assign_response else None

    if not reuse_existing:
        all_logs = getattr(state, "all_logs", None)
        if all_logs:
            log = all_logs[-1]
        if assign_response:
            response_logs = getattr(response, "all_logs", None)
            if response_logs:
                response_log = response_logs[-1]

    if log is None:
        log = get_root_logger()
    return Store(logger=log, response_logger=response_log)


class BindLoggerMiddleware(BaseHTTPMiddleware):
    """Middleware activating the request's Store for the rest of the pipeline."""

    def __init__(self, app: Callable, module: LoggerModule) -> None:
        """Initialize BindLoggerMiddleware.

        Args:
            app: The ASGI app to wrap.
            module: Logger module providing params and route selection.
        """
        super().__init__(app)
        self._module = module

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self._module.routes.applies_to(request.method, request.url.path):
            return await call_next(request)

        params = self._module.params
        store = build_store(
            request.state,
            reuse_existing=params.reuse_existing_logger,
            assign_response=params.assign_to_response_logger,
        )
        return await arun(store, call_next, request)
