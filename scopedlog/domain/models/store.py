"""Per-request logger store.

The Store is what the context carrier associates with one request extent.
It is intentionally mutable: ``ScopedLogger.with_fields`` swaps ``logger``
for a derived child, and every coroutine of the same request sees the swap
because they all hold the same Store object.
"""

from __future__ import annotations

from dataclasses import dataclass

from scopedlog.domain.ports.logger_handle import LoggerHandle, ResponseLoggerHandle


@dataclass(eq=False)
class Store:
    """Loggers active for one request.

    Attributes:
        logger: Primary handle every request-scoped call resolves to.
        response_logger: Optional handle the access-log layer uses for the
            completion record. Only set when response assignment is enabled.
    """

    logger: LoggerHandle
    response_logger: ResponseLoggerHandle | None = None
