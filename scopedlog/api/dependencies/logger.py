"""Logger FastAPI dependencies.

These dependencies hand the logging facades of the installed LoggerModule
to route handlers. The facades resolve the request's logger on every call,
so they can also be passed on to services the handler calls.

Usage:
    from fastapi import Depends

    from scopedlog.api.dependencies.logger import get_logger, request_logger

    registry = LoggerRegistry()

    @router.post("/orders")
    async def create_order(
        logger: Logger = Depends(get_logger),
        orders_log: ScopedLogger = request_logger("OrderRoutes", registry),
    ) -> dict:
        orders_log.with_fields({"tenant": "acme"})
        logger.info("creating order %s", order_id, "OrderRoutes")
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from scopedlog.api.module import STATE_ATTRIBUTE, LoggerModule
from scopedlog.application.services.logger_registry import LoggerRegistry
from scopedlog.application.services.message_normalizer import Logger
from scopedlog.application.services.scoped_logger import ScopedLogger
from scopedlog.domain.errors.scope import LoggerNotConfiguredError


def get_logging_module(request: Request) -> LoggerModule:
    """FastAPI dependency returning the LoggerModule installed on the app.

    Raises:
        LoggerNotConfiguredError: If ``LoggerModule.install`` was never
            called for this application.
    """
    module = getattr(request.app.state, STATE_ATTRIBUTE, None)
    if module is None:
        raise LoggerNotConfiguredError(
            "No logger module installed on this application; call LoggerModule.install(app)"
        )
    return module


def get_logger(module: LoggerModule = Depends(get_logging_module)) -> Logger:
    return module.logger


def get_scoped_logger(module: LoggerModule = Depends(get_logging_module)) -> ScopedLogger:
    """FastAPI dependency returning a fresh, unlabelled ScopedLogger."""
    return module.create_scoped_logger()


def request_logger(label: str, registry: LoggerRegistry) -> Any:
    """Declare a labelled ScopedLogger dependency.

    Must be called while the application is being described (typically at
    import time of a routes module), before the module is installed, so
    that ``install`` builds the binding for ``label``.

    Args:
        label: Label merged under the context field of every record.
        registry: Registry shared with the LoggerModule.

    Returns:
        A ``Depends`` marker resolving to the labelled ScopedLogger.
    """
    spec = registry.register_label(label)

    def _provide(module: LoggerModule = Depends(get_logging_module)) -> ScopedLogger:
        return module.get_logger(spec.label)

    return Depends(_provide)
