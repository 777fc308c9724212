"""FastAPI dependencies exposing the logging facades."""

from scopedlog.api.dependencies.logger import (
    get_logger,
    get_logging_module,
    get_scoped_logger,
    request_logger,
)

__all__: list[str] = [
    "get_logger",
    "get_logging_module",
    "get_scoped_logger",
    "request_logger",
]
