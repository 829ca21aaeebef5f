"""Dispatch Table - explicit routing from (method, path) to handler, guards and schema.

Invariants:
    - Every route is a RouteDescriptor listed explicitly - no decorators, no
      reflection, no auto-discovery
    - Descriptors and the table are immutable once built
    - Patterns are literal segments plus at most one trailing ":param" segment
    - Unknown method/path raises RouteNotFound (never returns None)

Design Decisions:
    - Linear scan over an index: a handful of routes, first match wins in
      declaration order
    - Trailing slashes ignored on both pattern and request path
"""

from dataclasses import dataclass
from typing import Callable

from users_api.core.domain_types import HttpMethod
from users_api.core.errors import RouteNotFound
from users_api.core.guards import Guard
from users_api.core.request_context import RequestContext
from users_api.core.validation import ValidationSchema

Handler = Callable[[RequestContext, dict | None], dict]


@dataclass(frozen=True)
class RouteDescriptor:
    """One route: method + pattern -> handler, with ordered guards and optional schema.

    accepts_body forces body parsing on routes without a schema.
    """
    method: HttpMethod
    pattern: str
    handler: Handler
    guards: tuple[Guard, ...] = ()
    schema: ValidationSchema | None = None
    accepts_body: bool = False

    @property
    def reads_body(self) -> bool:
        return self.accepts_body or self.schema is not None


def split_path(path: str) -> list[str]:
    return [segment for segment in path.strip("/").split("/") if segment]


def match_pattern(pattern: str, path: str) -> dict[str, str] | None:
    """Match path against pattern. Returns path params on hit, None on miss."""
    pattern_parts = split_path(pattern)
    path_parts = split_path(path)
    if len(pattern_parts) != len(path_parts):
        return None

    params: dict[str, str] = {}
    last = len(pattern_parts) - 1
    for index, (expected, actual) in enumerate(zip(pattern_parts, path_parts)):
        if expected.startswith(":") and index == last:
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params


@dataclass(frozen=True)
class Resolved:
    route: RouteDescriptor
    path_params: dict[str, str]


class DispatchTable:
    """Immutable route table built once at startup."""

    def __init__(self, routes: list[RouteDescriptor], prefix: str = ""):
        self._routes = tuple(routes)
        self._prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""

    @property
    def routes(self) -> tuple[RouteDescriptor, ...]:
        return self._routes

    @property
    def prefix(self) -> str:
        return self._prefix

    def resolve(self, method: str, path: str) -> Resolved:
        """Find the first route matching method + path, or raise RouteNotFound."""
        relative = self._strip_prefix(path)
        if relative is not None:
            for route in self._routes:
                if route.method.value != method.upper():
                    continue
                params = match_pattern(route.pattern, relative)
                if params is not None:
                    return Resolved(route=route, path_params=params)
        raise RouteNotFound(method.upper(), path)

    def _strip_prefix(self, path: str) -> str | None:
        if not self._prefix:
            return path
        if path == self._prefix or path.startswith(self._prefix + "/"):
            return path[len(self._prefix):] or "/"
        return None
