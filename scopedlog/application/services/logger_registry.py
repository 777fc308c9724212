"""Named-logger registry.

Labels are declared while the application is being described (route and
service modules call ``request_logger("Label", registry)`` at import time),
but the loggers they refer to can only be built once the logger module is
configured. The registry bridges the two phases:

1. ``register_label`` collects labels, deduplicated, in declaration order.
2. ``build_bindings`` turns every known label into a lazy binding that, when
   resolved, yields a ScopedLogger with that label set.

Labels are never removed; a label declared twice resolves to one binding.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from scopedlog.application.services.scoped_logger import ScopedLogger

# Binding tokens look like "ScopedLogger:PaymentService"
LOGGER_TOKEN_PREFIX = "ScopedLogger:"


def get_logger_token(label: str) -> str:
    """Token identifying the binding of ``label``."""
    return f"{LOGGER_TOKEN_PREFIX}{label}"


@dataclass(frozen=True)
class NamedLoggerSpec:
    """A declared logger label."""

    label: str

    @property
    def token(self) -> str:
        return get_logger_token(self.label)


@dataclass(frozen=True)
class LoggerBinding:
    """Lazy binding from a label to a labelled ScopedLogger.

    Attributes:
        spec: The label this binding serves.
        factory: Builds an unlabelled ScopedLogger on every resolution.
    """

    spec: NamedLoggerSpec
    factory: Callable[[], ScopedLogger]

    @property
    def token(self) -> str:
        return self.spec.token

    def resolve(self) -> ScopedLogger:
        """Build a fresh ScopedLogger carrying this binding's label."""
        logger = self.factory()
        logger.set_label(self.spec.label)
        return logger


class LoggerRegistry:
    """Append-only set of logger labels."""

    def __init__(self) -> None:
        # dict keeps declaration order
        self._specs: dict[str, NamedLoggerSpec] = {}

    def register_label(self, label: str = "") -> NamedLoggerSpec:
        """Declare ``label``; later declarations of the same label are no-ops.

        Args:
            label: Label to declare. The empty label means "no label".

        Returns:
            The spec registered for ``label`` (the first one).
        """
        spec = self._specs.get(label)
        if spec is None:
            spec = NamedLoggerSpec(label)
            self._specs[label] = spec
        return spec

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._specs)

    def __contains__(self, label: object) -> bool:
        return label in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[NamedLoggerSpec]:
        return iter(tuple(self._specs.values()))

    def build_bindings(self, factory: Callable[[], ScopedLogger]) -> dict[str, LoggerBinding]:
        """Materialize one binding per declared label.

        Args:
            factory: Builds the unlabelled ScopedLogger each binding wraps.

        Returns:
            Bindings keyed by token.
        """
        return {spec.token: LoggerBinding(spec, factory) for spec in self}
