"""Request matching against a built ``RouteTable``.

Static routes are a dict lookup. Dynamic routes are tested one chunk at a
time; the first chunk whose combined pattern matches names the route via
its discriminator, and the route's own pattern then yields the captures.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from switchyard.errors import RouteNotFound
from switchyard.routing.route import Route, RouteMatch

if TYPE_CHECKING:
    from switchyard.routing.table import RouteTable

logger = logging.getLogger("switchyard.routing")


def match(table: RouteTable, method: str, path: str) -> RouteMatch:
    """Match *method* and *path* against *table*.

    Returns a fresh ``RouteMatch`` on success.
    Raises ``RouteNotFound`` if no static or dynamic route matches.
    """
    method = method.upper()

    static = table.static_routes.get(method)
    if static is not None:
        route = static.get(path)
        if route is None and not table.config.strict_slashes:
            route = static.get(_toggle_trailing_slash(path))
        if route is not None:
            return RouteMatch(route=route, bindings={})

    for chunk in table.dynamic_chunks.get(method, ()):
        found = chunk.pattern.fullmatch(path)
        if found is None:
            continue
        route = chunk.routes[found.lastindex]
        return RouteMatch(route=route, bindings=_bind(route, path))

    logger.debug("No route matches %s %s", method, path)
    raise RouteNotFound(path)


def _toggle_trailing_slash(path: str) -> str:
    if path.endswith("/"):
        return path.rstrip("/")
    return path + "/"


def _bind(route: Route, path: str) -> dict[str, str]:
    """Re-match against the route's own pattern and name the captures.

    Unmatched optional variables (``None``) and empty captures are left
    out of the bindings.
    """
    found = route.pattern.fullmatch(path)
    if found is None:
        raise RouteNotFound(path)
    return {name: value for name, value in zip(route.variables, found.groups()) if value}
