"""Domain errors for the request-scoped logging subsystem."""

from scopedlog.domain.errors.reported import ReportedError
from scopedlog.domain.errors.scope import (
    LoggerNotConfiguredError,
    OutOfRequestScopeError,
    UnknownLoggerLabelError,
)

__all__: list[str] = [
    "LoggerNotConfiguredError",
    "OutOfRequestScopeError",
    "ReportedError",
    "UnknownLoggerLabelError",
]
