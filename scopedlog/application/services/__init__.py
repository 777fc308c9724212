"""Logging facades and the named-logger registry."""

from scopedlog.application.services.logger_registry import (
    LoggerBinding,
    LoggerRegistry,
    NamedLoggerSpec,
    get_logger_token,
)
from scopedlog.application.services.message_normalizer import Logger, normalize
from scopedlog.application.services.scoped_logger import ScopedLogger

__all__: list[str] = [
    "Logger",
    "LoggerBinding",
    "LoggerRegistry",
    "NamedLoggerSpec",
    "ScopedLogger",
    "get_logger_token",
    "normalize",
]
