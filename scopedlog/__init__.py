"""
scopedlog - Request-scoped structured logging for ASGI services

Every log statement emitted while a request is being handled resolves to
that request's own logger, across await points, spawned tasks and injected
services, without passing a logger or a request id around.
"""

__version__ = "0.1.0"

# Registers the structlog root factory
import scopedlog.infrastructure.observability  # noqa: E402,F401

__all__ = ["__version__"]
