"""Application-level observability utilities."""

from scopedlog.application.observability.context import (
    arun,
    get_active_store,
    run,
    store_scope,
)
from scopedlog.application.observability.root_logger import (
    ensure_root_logger,
    get_root_logger,
    initialize_root_logger,
    is_root_logger_initialized,
    register_root_factory,
    reset_root_logger,
)

__all__ = [
    "arun",
    "ensure_root_logger",
    "get_active_store",
    "get_root_logger",
    "initialize_root_logger",
    "is_root_logger_initialized",
    "register_root_factory",
    "reset_root_logger",
    "run",
    "store_scope",
]
