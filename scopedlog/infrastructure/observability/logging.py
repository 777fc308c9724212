"""Structured logging configuration with structlog.

This module provides the structlog side of scopedlog:

- ``ScopedBoundLogger``: a structlog bound logger implementing the
  LoggerHandle port (``trace`` .. ``fatal`` taking fields, message and
  printf-style arguments, plus ``with_fields``).
- ``create_root_logger``: builds an independent root handle from
  TransportOptions, with its own processor chain and destination.
- ``configure_structlog``: configures the global structlog pipeline the
  same way, for code that calls ``structlog.get_logger()`` directly.

Log Entry Format (production):
    {
        "context": "PaymentService",
        "req_id": "uuid",
        "event": "charging order 42",
        "level": "info",
        "timestamp": "2024-01-01T00:00:00.000000Z",
        ...additional fields
    }

Usage:
    root = create_root_logger(TransportOptions(environment="production"))
    root.info({"user_id": 7}, "user %s logged in", "alice")
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import IO, Any

import structlog
from structlog.typing import Processor

from scopedlog.application.observability.root_logger import register_root_factory
from scopedlog.config.logger_params import (
    DEFAULT_ERROR_FIELD_NAME,
    DEFAULT_LOG_LEVEL,
    LOG_LEVEL_ENV,
    TransportOptions,
    normalize_level_name,
)
from scopedlog.domain.ports.logger_handle import LOG_LEVELS, LoggerHandle
from scopedlog.infrastructure.observability.processors import (
    POSITIONAL_ARGS_KEY,
    ensure_event,
    interpolate_message,
    serialize_error,
)

# Wrapped logger method used per level; trace has no dedicated method on
# PrintLogger or the stdlib logger.
_LOGGER_METHODS: dict[str, str] = {"trace": "debug", "warn": "warning", "fatal": "critical"}


class ScopedBoundLogger(structlog.BoundLoggerBase):
    """structlog bound logger speaking the LoggerHandle protocol.

    Use ``make_scoped_bound_logger`` to get a class filtering at a level.
    """

    _min_level: int = 0

    def _emit(
        self,
        method_name: str,
        fields: Mapping[str, Any],
        message: str | None,
        args: tuple[Any, ...],
    ) -> Any:
        if LOG_LEVELS[method_name] < self._min_level:
            return None
        event_kw = dict(fields)
        if args:
            event_kw[POSITIONAL_ARGS_KEY] = args
        try:
            out_args, out_kw = self._process_event(method_name, message, event_kw)
        except structlog.DropEvent:
            return None
        return getattr(self._logger, _LOGGER_METHODS.get(method_name, method_name))(
            *out_args, **out_kw
        )

    def trace(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._emit("trace", fields, message, args)

    def debug(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._emit("debug", fields, message, args)

    def info(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._emit("info", fields, message, args)

    def warn(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._emit("warn", fields, message, args)

    def error(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._emit("error", fields, message, args)

    def fatal(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._emit("fatal", fields, message, args)

    def with_fields(self, fields: Mapping[str, Any]) -> ScopedBoundLogger:
        """Derive a child with ``fields`` permanently bound."""
        return self.bind(**{str(key): value for key, value in fields.items()})

    def is_enabled(self, level: str) -> bool:
        return LOG_LEVELS[level] >= self._min_level


_FILTERING_CLASSES: dict[str, type[ScopedBoundLogger]] = {}


def make_scoped_bound_logger(level: str) -> type[ScopedBoundLogger]:
    """Get a ScopedBoundLogger class dropping records below ``level``.

    Args:
        level: Level name (see LOG_LEVELS; stdlib spellings accepted).

    Returns:
        The (cached) filtering class.
    """
    name = normalize_level_name(level)
    cls = _FILTERING_CLASSES.get(name)
    if cls is None:
        cls = type(
            f"ScopedBoundLoggerFilteringAt{name.capitalize()}",
            (ScopedBoundLogger,),
            {"_min_level": LOG_LEVELS[name]},
        )
        _FILTERING_CLASSES[name] = cls
    return cls


def _get_log_level() -> str:
    """Get the configured log level name from environment."""
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)


def build_processors(
    environment: str = "production",
    error_key: str = DEFAULT_ERROR_FIELD_NAME,
) -> list[Processor]:
    """Processor chain shared by root handles and the global configuration.

    Args:
        environment: 'production' for JSON output, anything else for console.
        error_key: Field holding exceptions.

    Returns:
        The processors, renderer last.
    """
    shared_processors: list[Processor] = [
        # Merge context from contextvars (async support)
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        interpolate_message,
        serialize_error(error_key),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        # JSON output for log aggregation
        return shared_processors + [structlog.processors.JSONRenderer()]
    return shared_processors + [ensure_event, structlog.dev.ConsoleRenderer(colors=True)]


def create_root_logger(options: TransportOptions | None = None) -> LoggerHandle:
    """Build a root handle from transport options.

    An already built handle in ``options.logger`` is returned as is.

    Args:
        options: Transport options (defaults read the environment).

    Returns:
        A root handle with no bound fields.
    """
    options = options or TransportOptions()
    if options.logger is not None:
        return options.logger
    wrapper_class = make_scoped_bound_logger(options.level)
    return wrapper_class(
        structlog.PrintLogger(file=options.stream),
        processors=build_processors(options.environment, options.attribute_key("err")),
        context={},
    )


def configure_structlog(
    environment: str = "production",
    level: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the global structlog pipeline.

    Should be called once at application startup so modules logging through
    ``structlog.get_logger()`` share the format of scopedlog handles.

    Args:
        environment: 'production' for JSON output, 'development' for console.
        level: Minimum level name; defaults to the LOG_LEVEL variable.
        stream: Destination; defaults to stdout.
    """
    name = normalize_level_name(level or _get_log_level())
    # stdlib numbers, with trace folded into debug
    min_level = max(LOG_LEVELS[name], logging.DEBUG)

    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=True,
    )


register_root_factory(create_root_logger)
