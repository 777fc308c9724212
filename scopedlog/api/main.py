"""FastAPI application entry point for the scopedlog demo service."""

from __future__ import annotations

from fastapi import FastAPI

from scopedlog import __version__
from scopedlog.api.module import LoggerModule
from scopedlog.api.routes import registry
from scopedlog.api.routes.health import router as health_router
from scopedlog.bootstrap.logging import build_logger_params, configure_logging, load_environment
from scopedlog.config.logger_params import LoggerParams


def create_app(params: LoggerParams | None = None) -> FastAPI:
    """Build the application with request-scoped logging installed.

    Args:
        params: Logger parameters; built from the environment when omitted.

    Returns:
        The configured application.
    """
    if params is None:
        load_environment()
        configure_logging()
        params = build_logger_params()

    module = LoggerModule.for_root(params, registry=registry)

    app = FastAPI(
        title="scopedlog demo",
        description="Request-scoped structured logging",
        version=__version__,
    )
    app.include_router(health_router)
    return module.install(app)


app = create_app()
