"""Ports describing the logger capabilities the core depends on."""

from scopedlog.domain.ports.logger_handle import (
    LOG_LEVELS,
    LoggerHandle,
    LogLevel,
    ResponseLoggerHandle,
)

__all__: list[str] = [
    "LOG_LEVELS",
    "LogLevel",
    "LoggerHandle",
    "ResponseLoggerHandle",
]
