"""Bootstrap wiring: environment loading and logging startup."""

from scopedlog.bootstrap.logging import (
    build_logger_params,
    configure_logging,
    load_environment,
)

__all__ = ["build_logger_params", "configure_logging", "load_environment"]
