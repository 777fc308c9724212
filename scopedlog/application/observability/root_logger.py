"""Process-wide fallback logger (set-once cell).

Log calls made outside any request, and calls made inside a request whose
Store could not be built from upstream loggers, go to this handle. It is
assigned at most once: the first writer wins and later offers are ignored,
so every component resolves the same configured root.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from scopedlog.config.logger_params import TransportOptions
from scopedlog.domain.errors.scope import LoggerNotConfiguredError
from scopedlog.domain.ports.logger_handle import LoggerHandle

RootFactory = Callable[[TransportOptions], LoggerHandle]

# Singleton handle
_root_logger: LoggerHandle | None = None
_root_lock = threading.Lock()

# Builds the root on first use when nothing was offered; registered by the
# structlog adapter
_root_factory: RootFactory | None = None


def initialize_root_logger(handle: LoggerHandle) -> LoggerHandle:
    """Offer ``handle`` as the process-wide fallback.

    Uses double-checked locking so a worker thread cannot race the event
    loop during startup.

    Args:
        handle: Candidate root handle.

    Returns:
        The effective root handle (``handle`` if this call won, otherwise
        the handle installed earlier).
    """
    global _root_logger
    if _root_logger is None:
        with _root_lock:
            # Double-check inside lock
            if _root_logger is None:
                _root_logger = handle
    return _root_logger


def get_root_logger() -> LoggerHandle:
    """Get the process-wide fallback handle.

    Raises:
        LoggerNotConfiguredError: If no root handle was ever initialized.
    """
    if _root_logger is None:
        raise LoggerNotConfiguredError(
            "Root logger is not initialized; configure the logger module first"
        )
    return _root_logger


def is_root_logger_initialized() -> bool:
    return _root_logger is not None


def reset_root_logger() -> None:
    """Reset the fallback cell (for testing only)."""
    global _root_logger
    with _root_lock:
        _root_logger = None


def register_root_factory(factory: RootFactory) -> None:
    """Register the builder used by ``ensure_root_logger``."""
    global _root_factory
    _root_factory = factory


def ensure_root_logger(options: TransportOptions) -> LoggerHandle:
    """Get the fallback handle, building it from ``options`` if none was offered.

    Args:
        options: Transport options for the handle built on first use.

    Raises:
        LoggerNotConfiguredError: If no handle was offered and no factory
            is registered.
    """
    if _root_logger is None and _root_factory is not None:
        return initialize_root_logger(_root_factory(options))
    return get_root_logger()
