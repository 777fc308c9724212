"""Route selection for the logging middlewares.

Patterns are globs on the request path, optionally prefixed by an HTTP
method::

    "*"                 every request
    "/v1/users/*"       any method under /v1/users/
    "GET /v1/health"    only GET /v1/health
    "ALL /internal/*"   same as "/internal/*"
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase

HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "ALL"}
)


@dataclass(frozen=True)
class RoutePattern:
    """One parsed route pattern."""

    path: str
    method: str | None = None

    @classmethod
    def parse(cls, pattern: str) -> RoutePattern:
        """Parse ``"[METHOD] path-glob"``.

        Args:
            pattern: The pattern text.

        Returns:
            The parsed pattern; method None matches every method.
        """
        parts = pattern.split(None, 1)
        if len(parts) == 2 and parts[0].upper() in HTTP_METHODS:
            method = parts[0].upper()
            return cls(path=parts[1].strip(), method=None if method == "ALL" else method)
        return cls(path=pattern.strip())

    def matches(self, method: str, path: str) -> bool:
        if self.method is not None and self.method != method.upper():
            return False
        return fnmatchcase(path, self.path)


class RouteSelector:
    """Decides which requests the logging middlewares handle."""

    def __init__(self, for_routes: Iterable[str], exclude_routes: Iterable[str] = ()) -> None:
        self._included = tuple(RoutePattern.parse(p) for p in for_routes)
        self._excluded = tuple(RoutePattern.parse(p) for p in exclude_routes)

    def applies_to(self, method: str, path: str) -> bool:
        """Whether a request is in ``for_routes`` and not in ``exclude_routes``."""
        if any(pattern.matches(method, path) for pattern in self._excluded):
            return False
        return any(pattern.matches(method, path) for pattern in self._included)
