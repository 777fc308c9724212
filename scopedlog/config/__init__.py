"""Configuration for the logger module."""

from scopedlog.config.logger_params import (
    DEFAULT_ATTRIBUTE_KEYS,
    DEFAULT_CONTEXT_FIELD_NAME,
    DEFAULT_ERROR_FIELD_NAME,
    DEFAULT_ROUTES,
    LoggerParams,
    TransportOptions,
)

__all__: list[str] = [
    "DEFAULT_ATTRIBUTE_KEYS",
    "DEFAULT_CONTEXT_FIELD_NAME",
    "DEFAULT_ERROR_FIELD_NAME",
    "DEFAULT_ROUTES",
    "LoggerParams",
    "TransportOptions",
]
