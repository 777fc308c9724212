"""Observability infrastructure: structlog handles, processors and request ids.

Usage:
    from scopedlog.infrastructure.observability import (
        configure_structlog,
        create_root_logger,
    )

    # At startup
    configure_structlog(environment="production")
    root = create_root_logger(params.transport)
"""

from scopedlog.infrastructure.observability.logging import (
    ScopedBoundLogger,
    build_processors,
    configure_structlog,
    create_root_logger,
    make_scoped_bound_logger,
)
from scopedlog.infrastructure.observability.processors import (
    error_to_dict,
    format_message,
    interpolate_message,
    serialize_error,
)
from scopedlog.infrastructure.observability.request_id import (
    generate_request_id,
    resolve_request_id,
)
from scopedlog.infrastructure.observability.response_logger import ResponseLogger

__all__: list[str] = [
    "ResponseLogger",
    "ScopedBoundLogger",
    "build_processors",
    "configure_structlog",
    "create_root_logger",
    "error_to_dict",
    "format_message",
    "generate_request_id",
    "interpolate_message",
    "make_scoped_bound_logger",
    "resolve_request_id",
    "serialize_error",
]
