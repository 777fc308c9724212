"""Logger handle protocols.

A logger handle is an opaque capability: one method per severity level plus
a way to derive a child handle with extra permanently bound fields. The
core never looks inside a handle; the structlog adapter in
``scopedlog.infrastructure.observability`` is the production implementation
and tests use simple recorders.

Every severity method takes the canonical triple produced by the message
normalizer::

    handle.info({"user_id": 7}, "user %s logged in", "alice")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Protocol, runtime_checkable

LogLevel = Literal["trace", "debug", "info", "warn", "error", "fatal"]

# Severity order, lowest first. Values line up with the stdlib logging levels
# so filtering thresholds read the same in both worlds.
LOG_LEVELS: dict[str, int] = {
    "trace": 5,
    "debug": 10,
    "info": 20,
    "warn": 30,
    "error": 40,
    "fatal": 50,
}


@runtime_checkable
class LoggerHandle(Protocol):
    """Minimal structured logging interface the core delegates to."""

    def trace(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any: ...

    def debug(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any: ...

    def info(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any: ...

    def warn(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any: ...

    def error(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any: ...

    def fatal(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any: ...

    def with_fields(self, fields: Mapping[str, Any]) -> LoggerHandle:
        """Return a child handle with ``fields`` bound to every record."""
        ...


@runtime_checkable
class ResponseLoggerHandle(LoggerHandle, Protocol):
    """A handle whose bindings can be extended in place.

    The access-log layer keeps a reference to the response logger and emits
    the completion record through it, so fields must be added without
    replacing the object.
    """

    def set_bindings(self, fields: Mapping[str, Any]) -> None: ...
