"""Route registration.

``RouteTableBuilder`` is mutable during setup: routes, groups, and
middleware scopes. ``build()`` freezes everything into a ``RouteTable``.

Dynamic routes are packed into chunks as they are registered. Each chunk
is one alternation of route patterns, so a single regex test checks up to
``chunk_size`` routes at once::

    (?:/users/([^/]+)()|/posts/([^/]+)/comments/([^/]+)()|...)

Every alternative is padded with empty groups up to the chunk's running
maximum variable count and closed by one marker group. The marker's group
number is unique within the chunk and is what ``Match.lastindex`` reports
when that alternative matches.
"""

import logging
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from http import HTTPMethod
from types import MappingProxyType
from typing import Any

from switchyard._internal.types import Handler, MiddlewareSpec
from switchyard.config import RouterConfig
from switchyard.errors import ConfigurationError
from switchyard.routing.route import Route, RouteSpec
from switchyard.routing.table import Chunk, RouteTable
from switchyard.routing.template import compile_segments, parse_path, variable_names

logger = logging.getLogger("switchyard.routing")

type PathSpec = str | RouteSpec | Mapping[str, str]


@dataclass(slots=True)
class _PendingChunk:
    """A chunk still accepting routes. Mutable during registration only."""

    alternatives: list[str] = field(default_factory=list)
    routes: dict[int, Route] = field(default_factory=dict)
    # Groups emitted so far in the combined pattern
    group_count: int = 0
    # Running maximum variable count of the routes in this chunk
    max_variables: int = 1

    def add(self, route: Route) -> int:
        """Append *route* as a padded alternative; return its discriminator."""
        num_variables = len(route.variables)
        self.max_variables = max(self.max_variables, num_variables)
        padding = "()" * (self.max_variables - num_variables)
        self.alternatives.append(f"{route.regex}{padding}()")
        self.group_count += self.max_variables + 1
        self.routes[self.group_count] = route
        return self.group_count

    def freeze(self) -> Chunk:
        return Chunk(
            pattern=re.compile("(?:" + "|".join(self.alternatives) + ")"),
            routes=MappingProxyType(dict(self.routes)),
        )


class RouteTableBuilder:
    """Accumulates routes during single-threaded startup.

    Usage::

        builder = RouteTableBuilder()
        builder.get("/", index)
        builder.group("/users", lambda b: b.get(RouteSpec("/{id}", name="users.show"), show))
        table = builder.build()
    """

    __slots__ = (
        "_aliases",
        "_chunks",
        "_middleware",
        "_names",
        "_prefixes",
        "_routes",
        "_static",
        "_table",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._prefixes: list[str] = []
        self._middleware: list[Any] = []
        self._static: dict[HTTPMethod, dict[str, Route]] = {}
        self._chunks: dict[HTTPMethod, list[_PendingChunk]] = {}
        self._aliases: dict[tuple[HTTPMethod, str], Route] = {}
        self._names: dict[str, Route] = {}
        self._routes: list[Route] = []
        self._table: RouteTable | None = None

    # -- Scopes --

    @contextmanager
    def prefixed(self, prefix: str = "", middleware: MiddlewareSpec = ()) -> Iterator["RouteTableBuilder"]:
        """Register routes under *prefix* and extra *middleware* inside the block.

        Both stacks are restored on exit, including when the block raises::

            with builder.prefixed("/admin", middleware=require_admin):
                builder.get("/stats", stats)
        """
        prefix_depth = len(self._prefixes)
        middleware_depth = len(self._middleware)
        self._prefixes.append(_normalize_prefix(prefix))
        self._middleware.extend(_as_sequence(middleware))
        try:
            yield self
        finally:
            del self._prefixes[prefix_depth:]
            del self._middleware[middleware_depth:]

    @contextmanager
    def using(self, middleware: MiddlewareSpec) -> Iterator["RouteTableBuilder"]:
        """Add *middleware* to every route registered inside the block."""
        middleware_depth = len(self._middleware)
        self._middleware.extend(_as_sequence(middleware))
        try:
            yield self
        finally:
            del self._middleware[middleware_depth:]

    def group(
        self,
        prefix: str | Mapping[str, Any],
        callback: Callable[["RouteTableBuilder"], Any],
    ) -> "RouteTableBuilder":
        """Run *callback* with a prefix (and optional middleware) scope active.

        *prefix* is either a path prefix or a mapping with ``prefix`` and
        ``middleware`` keys.
        """
        if isinstance(prefix, Mapping):
            options = prefix
            with self.prefixed(options.get("prefix", ""), options.get("middleware", ())):
                callback(self)
        else:
            with self.prefixed(prefix):
                callback(self)
        return self

    def middleware(
        self,
        middleware: MiddlewareSpec,
        callback: Callable[["RouteTableBuilder"], Any],
    ) -> "RouteTableBuilder":
        """Run *callback* with *middleware* appended to the middleware scope."""
        with self.using(middleware):
            callback(self)
        return self

    # -- Registration --

    def add_route(
        self,
        method: str,
        path: PathSpec,
        handler: Handler,
        defaults: Mapping[str, Any] | None = None,
    ) -> Route:
        """Register a route and return it.

        Registering an existing (method, name) pair again returns the
        first route unchanged.
        """
        if self._table is not None:
            msg = "Cannot add routes after the route table has been built."
            raise RuntimeError(msg)

        http_method = _normalize_method(method)
        spec = _as_route_spec(path)
        full_path = "".join(self._prefixes) + spec.path
        name = spec.name or full_path

        existing = self._aliases.get((http_method, name))
        if existing is not None:
            logger.debug("Route %s %r already registered, keeping the first", http_method, name)
            return existing

        route = self.create_route(http_method, full_path, handler, name, spec, defaults)

        if route.is_static:
            self._static.setdefault(http_method, {})[full_path] = route
        else:
            chunk = self._current_chunk(http_method)
            discriminator = chunk.add(route)
            logger.debug(
                "Route %s %s -> chunk %d, discriminator %d",
                http_method,
                full_path,
                len(self._chunks[http_method]) - 1,
                discriminator,
            )

        self._aliases[(http_method, name)] = route
        self._names.setdefault(name, route)
        self._routes.append(route)
        return route

    def create_route(
        self,
        method: HTTPMethod,
        path: str,
        handler: Handler,
        name: str,
        spec: RouteSpec,
        defaults: Mapping[str, Any] | None = None,
    ) -> Route:
        """Parse *path* and build the ``Route`` for it."""
        segments = parse_path(path)
        if isinstance(handler, str):
            handler = self.config.namespace + handler
        return Route(
            method=method,
            path=path,
            handler=handler,
            name=name,
            regex=compile_segments(segments),
            variables=tuple(variable_names(segments)),
            segments=segments,
            defaults=MappingProxyType(dict(defaults or {})),
            host=spec.host,
            protocol=spec.protocol,
            middleware=tuple(self._middleware),
            prefix="".join(self._prefixes),
        )

    def route(
        self,
        path: PathSpec,
        *,
        methods: Sequence[str] = ("GET",),
        defaults: Mapping[str, Any] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register the decorated function for each of *methods*."""

        def decorator(func: Handler) -> Handler:
            for method in methods:
                self.add_route(method, path, func, defaults)
            return func

        return decorator

    def get(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("GET", path, handler, defaults)

    def post(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("POST", path, handler, defaults)

    def put(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("PUT", path, handler, defaults)

    def delete(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("DELETE", path, handler, defaults)

    def head(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("HEAD", path, handler, defaults)

    def options(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("OPTIONS", path, handler, defaults)

    def patch(self, path: PathSpec, handler: Handler, defaults: Mapping[str, Any] | None = None) -> Route:
        return self.add_route("PATCH", path, handler, defaults)

    # -- Freezing --

    def build(self) -> RouteTable:
        """Freeze registered routes into a ``RouteTable``.

        Further registration raises ``RuntimeError``. Calling ``build()``
        again returns the same table.
        """
        if self._table is not None:
            return self._table

        table = RouteTable(
            config=self.config,
            static_routes=MappingProxyType(
                {method: MappingProxyType(dict(paths)) for method, paths in self._static.items()}
            ),
            dynamic_chunks=MappingProxyType(
                {
                    method: tuple(chunk.freeze() for chunk in chunks)
                    for method, chunks in self._chunks.items()
                }
            ),
            aliases=MappingProxyType(dict(self._aliases)),
            names=MappingProxyType(dict(self._names)),
            routes=tuple(self._routes),
        )
        self._table = table
        logger.debug(
            "Built route table: %d routes, %d static, %d dynamic chunks",
            len(table.routes),
            sum(len(paths) for paths in self._static.values()),
            sum(len(chunks) for chunks in self._chunks.values()),
        )
        return table

    # -- Internal --

    def _current_chunk(self, method: HTTPMethod) -> _PendingChunk:
        chunks = self._chunks.setdefault(method, [])
        if not chunks or len(chunks[-1].alternatives) >= self.config.chunk_size:
            if chunks:
                logger.debug("Chunk %d for %s is full, opening a new one", len(chunks) - 1, method)
            chunks.append(_PendingChunk())
        return chunks[-1]

    def __repr__(self) -> str:
        return f"<RouteTableBuilder routes={len(self._routes)}>"


def _normalize_method(method: str) -> HTTPMethod:
    try:
        return HTTPMethod(method.upper())
    except ValueError:
        msg = f"Invalid HTTP method: {method!r}"
        raise ConfigurationError(msg) from None


def _normalize_prefix(prefix: str) -> str:
    """``"api/"`` -> ``"/api"``; empty and ``"/"`` contribute nothing."""
    stripped = prefix.strip("/")
    return f"/{stripped}" if stripped else ""


def _as_sequence(middleware: MiddlewareSpec) -> tuple[Any, ...]:
    if middleware is None:
        return ()
    if isinstance(middleware, (list, tuple)):
        return tuple(middleware)
    return (middleware,)


def _as_route_spec(path: PathSpec) -> RouteSpec:
    if isinstance(path, RouteSpec):
        return path
    if isinstance(path, str):
        return RouteSpec(path=path)
    if "path" not in path:
        msg = f"Route spec {dict(path)!r} has no 'path'."
        raise ConfigurationError(msg)
    return RouteSpec(
        path=path["path"],
        name=path.get("name"),
        host=path.get("host", ""),
        protocol=path.get("protocol", ""),
    )
