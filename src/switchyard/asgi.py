"""ASGI scope binding.

Resolves the route for a raw ASGI HTTP scope and hands the bindings to the
request layer the way ASGI frameworks expect them, as
``scope["path_params"]``. The router never touches the request itself.

Usage::

    async def app(scope, receive, send):
        try:
            match = resolve(table, scope)
        except RouteNotFound:
            ...  # send a 404
        scope = bind(scope, match)
        await dispatch(match.route.handler, scope, receive, send)
"""

from typing import Any

from switchyard._internal.types import Scope
from switchyard.routing.route import RouteMatch
from switchyard.routing.table import RouteTable


def resolve(table: RouteTable, scope: Scope) -> RouteMatch:
    """Match the scope's method and path. Raises ``RouteNotFound``."""
    return table.match(scope["method"], scope["path"])


def bind(scope: Scope, match: RouteMatch) -> dict[str, Any]:
    """Return a copy of *scope* carrying the match.

    ``path_params`` merges any existing values with the bindings (bindings
    win); ``route`` is the matched ``Route``. *scope* itself is not
    modified.
    """
    path_params = {**scope.get("path_params", {}), **match.bindings}
    return {**scope, "path_params": path_params, "route": match.route}
