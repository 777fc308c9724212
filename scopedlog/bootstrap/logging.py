"""Bootstrap wiring for logging configuration.

Startup sequence:
    load_environment()        # .env values become environment defaults
    configure_logging()       # global structlog pipeline
    params = build_logger_params(exclude_routes=("/v1/health",))
    module = LoggerModule.for_root(params, registry=registry)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from structlog import get_logger

from scopedlog.config.logger_params import (
    DEFAULT_ENVIRONMENT,
    ENVIRONMENT_ENV,
    LoggerParams,
    TransportOptions,
)
from scopedlog.infrastructure.observability import configure_structlog


def load_environment(dotenv_path: str | Path | None = None) -> bool:
    """Load a ``.env`` file without overriding variables already set.

    Args:
        dotenv_path: File to read; defaults to searching from the working
            directory upwards.

    Returns:
        True if a file was found and read.
    """
    return load_dotenv(dotenv_path=dotenv_path, override=False)


def configure_logging() -> None:
    """Configure structlog from the ENVIRONMENT variable.

    - production (default): JSON output for log aggregation
    - anything else: Colored console output

    Should be called first in the startup sequence, before any logging occurs.
    """
    environment = os.getenv(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)
    configure_structlog(environment="production" if environment == "production" else "development")

    log = get_logger().bind(component="startup_logging")
    log.info("structured_logging_configured", environment=environment)


def build_logger_params(**overrides: Any) -> LoggerParams:
    """Build LoggerParams with transport defaults taken from the environment.

    Args:
        **overrides: LoggerParams fields to set explicitly.

    Returns:
        The validated parameters.
    """
    overrides.setdefault("transport", TransportOptions())
    return LoggerParams(**overrides)
