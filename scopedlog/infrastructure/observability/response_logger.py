"""Response logger with in-place bindings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scopedlog.domain.ports.logger_handle import LoggerHandle


class ResponseLogger:
    """Mutable wrapper around a logger handle.

    The access-log layer holds on to this object for the whole request and
    emits the completion record through it. ``set_bindings`` adds fields
    without changing the object, so whoever holds a reference sees them.
    """

    def __init__(self, handle: LoggerHandle) -> None:
        self._handle = handle

    @property
    def handle(self) -> LoggerHandle:
        return self._handle

    def set_bindings(self, fields: Mapping[str, Any]) -> None:
        self._handle = self._handle.with_fields(fields)

    def with_fields(self, fields: Mapping[str, Any]) -> LoggerHandle:
        return self._handle.with_fields(fields)

    def trace(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._handle.trace(fields, message, *args)

    def debug(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._handle.debug(fields, message, *args)

    def info(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._handle.info(fields, message, *args)

    def warn(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._handle.warn(fields, message, *args)

    def error(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._handle.error(fields, message, *args)

    def fatal(self, fields: Mapping[str, Any], message: str | None = None, *args: Any) -> Any:
        return self._handle.fatal(fields, message, *args)
