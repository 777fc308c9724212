"""API routes.

``registry`` collects the logger labels the route modules declare; the
application installs its LoggerModule with it.
"""

from scopedlog.application.services.logger_registry import LoggerRegistry

registry = LoggerRegistry()

__all__ = ["registry"]
