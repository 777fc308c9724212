"""Logger module: configuration and FastAPI registration.

The module owns everything the logging subsystem provides to an
application: the root logger, the ``Logger`` facade, unlabelled and
labelled ``ScopedLogger`` instances, and the middlewares.

Usage (fixed configuration):
    registry = LoggerRegistry()
    module = LoggerModule.for_root(LoggerParams(), registry=registry)
    app = module.install(FastAPI())

Usage (configuration built from other dependencies):
    async def logging_params(settings: Settings) -> LoggerParams:
        return LoggerParams(transport=TransportOptions(level=settings.log_level))

    module = LoggerModule.for_root_async(logging_params, inject=[settings])
    app = module.install(FastAPI(lifespan=module.lifespan))
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Mapping
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from fastapi import FastAPI

from scopedlog.api.middleware.access_log import AccessLogMiddleware
from scopedlog.api.middleware.bind_logger import BindLoggerMiddleware
from scopedlog.api.middleware.routes import RouteSelector
from scopedlog.application.observability.root_logger import initialize_root_logger
from scopedlog.application.services.logger_registry import (
    LoggerBinding,
    LoggerRegistry,
    get_logger_token,
)
from scopedlog.application.services.message_normalizer import Logger
from scopedlog.application.services.scoped_logger import ScopedLogger
from scopedlog.config.logger_params import LoggerParams
from scopedlog.domain.errors.scope import LoggerNotConfiguredError, UnknownLoggerLabelError
from scopedlog.domain.ports.logger_handle import LoggerHandle
from scopedlog.infrastructure.observability.logging import create_root_logger

# Attribute of app.state holding the installed module
STATE_ATTRIBUTE = "scoped_logging"

ParamsInput = LoggerParams | Mapping[str, Any] | None
ParamsFactory = Callable[..., ParamsInput | Awaitable[ParamsInput]]

T = TypeVar("T")


def _require_configured(value: T | None) -> T:
    if value is None:
        raise LoggerNotConfiguredError(
            "Logger module parameters are not resolved yet; await configure() "
            "or run the application with module.lifespan"
        )
    return value


def _coerce_params(params: ParamsInput) -> LoggerParams:
    if params is None:
        return LoggerParams()
    if isinstance(params, LoggerParams):
        return params
    return LoggerParams.model_validate(params)


class LoggerModule:
    """Configured logging subsystem of one application.

    Attributes:
        registry: Labels declared with ``request_logger``.
    """

    def __init__(
        self,
        params: ParamsInput = None,
        *,
        use_factory: ParamsFactory | None = None,
        inject: Iterable[Any] = (),
        registry: LoggerRegistry | None = None,
    ) -> None:
        """Initialize LoggerModule.

        Prefer ``for_root`` and ``for_root_async``.

        Args:
            params: Fixed parameters (ignored when ``use_factory`` is set).
            use_factory: Sync or async callable producing the parameters.
            inject: Positional arguments for ``use_factory``.
            registry: Label registry shared with ``request_logger`` call sites.
        """
        self.registry = registry if registry is not None else LoggerRegistry()
        self._use_factory = use_factory
        self._inject = tuple(inject)

        self._params: LoggerParams | None = None
        self._root: LoggerHandle | None = None
        self._routes: RouteSelector | None = None
        self._logger: Logger | None = None
        self._bindings: dict[str, LoggerBinding] = {}

        if use_factory is None:
            self._configure(params)

    @classmethod
    def for_root(
        cls, params: ParamsInput = None, *, registry: LoggerRegistry | None = None
    ) -> LoggerModule:
        """Create a module from a fixed configuration."""
        return cls(params, registry=registry)

    @classmethod
    def for_root_async(
        cls,
        use_factory: ParamsFactory,
        *,
        inject: Iterable[Any] = (),
        registry: LoggerRegistry | None = None,
    ) -> LoggerModule:
        """Create a module whose configuration is produced at startup.

        The factory runs when ``configure`` is awaited, which ``lifespan``
        does before the application serves requests.
        """
        return cls(use_factory=use_factory, inject=inject, registry=registry)

    @property
    def is_configured(self) -> bool:
        return self._params is not None

    @property
    def params(self) -> LoggerParams:
        return _require_configured(self._params)

    @property
    def root(self) -> LoggerHandle:
        """Root logger the access-log layer derives request loggers from."""
        return _require_configured(self._root)

    @property
    def routes(self) -> RouteSelector:
        return _require_configured(self._routes)

    @property
    def logger(self) -> Logger:
        """The ``Logger`` facade."""
        return _require_configured(self._logger)

    async def configure(self) -> LoggerParams:
        """Resolve parameters (running the async factory once) and set up.

        Returns:
            The resolved parameters.
        """
        if self._params is None and self._use_factory is not None:
            result = self._use_factory(*self._inject)
            if inspect.isawaitable(result):
                result = await result
            self._configure(result)
        self.materialize_bindings()
        return self.params

    def _configure(self, params: ParamsInput) -> None:
        resolved = _coerce_params(params)
        self._root = create_root_logger(resolved.transport)
        # First writer wins; later modules keep their own access-log root
        initialize_root_logger(self._root)
        self._params = resolved
        self._routes = RouteSelector(resolved.for_routes, resolved.exclude_routes)
        self._logger = Logger(self.create_scoped_logger(), resolved)
        self.materialize_bindings()

    def materialize_bindings(self) -> dict[str, LoggerBinding]:
        """Build one binding per label declared so far."""
        if self._params is not None:
            self._bindings = self.registry.build_bindings(self.create_scoped_logger)
        return self._bindings

    def create_scoped_logger(self) -> ScopedLogger:
        """Build an unlabelled ScopedLogger."""
        return ScopedLogger(self.params, root=self._root)

    def get_logger(self, label: str = "") -> ScopedLogger:
        """Resolve the ScopedLogger for ``label``.

        Args:
            label: A label declared with ``request_logger``; empty for an
                unlabelled logger.

        Labels declared after the last materialization are bound on first
        lookup.

        Raises:
            UnknownLoggerLabelError: If ``label`` was never declared.
        """
        token = get_logger_token(label)
        binding = self._bindings.get(token)
        if binding is None and label in self.registry:
            binding = self.materialize_bindings().get(token)
        if binding is not None:
            return binding.resolve()
        if label:
            raise UnknownLoggerLabelError(label)
        return self.create_scoped_logger()

    def install(self, app: FastAPI) -> FastAPI:
        """Register the module and its middlewares on ``app``.

        The access-log middleware is added last so it runs first.

        Args:
            app: The application.

        Returns:
            The same application.
        """
        setattr(app.state, STATE_ATTRIBUTE, self)
        app.add_middleware(BindLoggerMiddleware, module=self)
        app.add_middleware(AccessLogMiddleware, module=self)
        self.materialize_bindings()
        return app

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """FastAPI lifespan resolving the configuration before serving."""
        await self.configure()
        yield
