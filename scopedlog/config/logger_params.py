"""Logger module configuration.

Parameters are pydantic models so a malformed configuration fails once, at
startup, instead of on every request.

Environment Variables:
- LOG_LEVEL: Minimum severity emitted (default: INFO). Accepts trace, debug,
  info, warn/warning, error, fatal/critical in any case.
- ENVIRONMENT: 'production' renders JSON lines, 'development' renders
  colored console output (default: production).

Usage:
    params = LoggerParams(
        transport=TransportOptions(level="debug", environment="development"),
        exclude_routes=("/v1/health",),
        assign_to_response_logger=True,
    )
"""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scopedlog.domain.ports.logger_handle import LOG_LEVELS

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
ENVIRONMENT_ENV = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "production"

DEFAULT_CONTEXT_FIELD_NAME = "context"
DEFAULT_ERROR_FIELD_NAME = "err"
DEFAULT_REQUEST_ID_HEADER = "X-Request-ID"

# Every route, every method
DEFAULT_ROUTES: tuple[str, ...] = ("*",)

# Record attribute names used by the access-log layer, overridable per key
# through TransportOptions.custom_attribute_keys.
DEFAULT_ATTRIBUTE_KEYS: dict[str, str] = {
    "req": "req",
    "res": "res",
    "err": DEFAULT_ERROR_FIELD_NAME,
    "reqId": "req_id",
    "responseTime": "response_time",
}

_LEVEL_ALIASES: dict[str, str] = {"warning": "warn", "critical": "fatal"}


def normalize_level_name(value: str) -> str:
    """Map a level name to one of LOG_LEVELS.

    Args:
        value: Level name, any case, stdlib spellings accepted.

    Returns:
        The canonical lower-case level name.

    Raises:
        ValueError: If the name is not a known level.
    """
    name = value.strip().lower()
    name = _LEVEL_ALIASES.get(name, name)
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {value!r}; expected one of {sorted(LOG_LEVELS)}")
    return name


def _env_level() -> str:
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)


def _env_environment() -> str:
    # Anything but production gets console output, as at application startup
    environment = os.getenv(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT).lower()
    return "production" if environment == "production" else "development"


class TransportOptions(BaseModel):
    """Options passed through to the structlog transport and access-log layer.

    Attributes:
        level: Minimum severity emitted by handles built from these options.
        environment: 'production' for JSON, 'development' for console output.
        stream: Text stream records are written to (default: stdout).
        logger: An already built root handle to use instead of building one.
        custom_attribute_keys: Renames for record attributes
            (``req``, ``res``, ``err``, ``reqId``, ``responseTime``).
        auto_logging: Emit a completion record for every request.
        quiet_req_logger: Bind only the request id to request loggers
            instead of the whole serialized request.
        request_id_header: Header read for (and echoed with) the request id.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    level: str = Field(default_factory=_env_level)
    environment: Literal["production", "development"] = Field(default_factory=_env_environment)
    stream: Any | None = None
    logger: Any | None = None
    custom_attribute_keys: dict[str, str] = Field(default_factory=dict)
    auto_logging: bool = True
    quiet_req_logger: bool = False
    request_id_header: str = DEFAULT_REQUEST_ID_HEADER

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        return normalize_level_name(value)

    @field_validator("custom_attribute_keys")
    @classmethod
    def _validate_attribute_keys(cls, value: dict[str, str]) -> dict[str, str]:
        unknown = set(value) - set(DEFAULT_ATTRIBUTE_KEYS)
        if unknown:
            raise ValueError(f"Unknown attribute keys: {sorted(unknown)}")
        if any(not name for name in value.values()):
            raise ValueError("Attribute key names must be non-empty")
        return value

    def attribute_key(self, name: str) -> str:
        """Resolve the record attribute name for ``name``.

        Args:
            name: One of the DEFAULT_ATTRIBUTE_KEYS keys.

        Returns:
            The configured override, or the default name.
        """
        return self.custom_attribute_keys.get(name, DEFAULT_ATTRIBUTE_KEYS[name])


class LoggerParams(BaseModel):
    """Configuration of the logger module.

    Attributes:
        transport: Options for the underlying structlog transport.
        for_routes: Route patterns the middlewares apply to. A pattern is a
            glob on the path, optionally prefixed by a method
            (``"GET /users/*"``).
        exclude_routes: Route patterns the middlewares skip.
        reuse_existing_logger: Use the logger an upstream layer already
            attached to the request; never create one.
        assign_to_response_logger: Make ``with_fields`` also bind onto the
            response logger, so completion records carry the fields.
        context_field_name: Field that receives the call-site context or
            the facade label.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    transport: TransportOptions = Field(default_factory=TransportOptions)
    for_routes: tuple[str, ...] = DEFAULT_ROUTES
    exclude_routes: tuple[str, ...] = ()
    reuse_existing_logger: bool = False
    assign_to_response_logger: bool = False
    context_field_name: str = Field(default=DEFAULT_CONTEXT_FIELD_NAME, min_length=1)

    @field_validator("for_routes", "exclude_routes")
    @classmethod
    def _validate_routes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not pattern.strip() for pattern in value):
            raise ValueError("Route patterns must be non-empty")
        return value

    @property
    def error_field_name(self) -> str:
        """Field that receives exceptions (transport override, else 'err')."""
        return self.transport.attribute_key("err")
