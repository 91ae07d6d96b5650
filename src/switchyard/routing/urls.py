"""URL generation, the inverse of matching.

Renders a named route's template with the given values and checks the
result against the route's own pattern, so every generated URL matches
back to the same route.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from switchyard.errors import RouteGenerationFailure, RouteNotFound
from switchyard.routing.route import Route
from switchyard.routing.template import render_segments

if TYPE_CHECKING:
    from switchyard.routing.table import RouteTable

logger = logging.getLogger("switchyard.routing")


def generate_url(
    table: RouteTable,
    name: str,
    params: Mapping[str, Any] | None = None,
    format: str | None = None,  # noqa: A002
) -> str:
    """Build the URL for the route named *name*.

    Values for path variables are substituted into the template; any other
    values become the query string. Route defaults fill in what *params*
    leaves out. ``None`` values count as not supplied.

    Raises ``RouteNotFound`` for an unknown name and
    ``RouteGenerationFailure`` when required variables are missing or a
    value does not fit its variable's pattern.

    Examples::

        generate_url(table, "users.show", {"id": 42})                 -> "/users/42"
        generate_url(table, "users.show", {"id": 42, "sort": "asc"})  -> "/users/42?sort=asc"
        generate_url(table, "feed", format="xml")                     -> "/feed.xml"
    """
    route = table.names.get(name)
    if route is None:
        raise RouteNotFound(name, detail=f"No route named {name!r}")

    suffix = f".{format}" if format else ""

    if route.is_static:
        return _absolute(table, route, route.path + suffix)

    values = {
        key: str(value)
        for key, value in {**route.defaults, **(params or {})}.items()
        if value is not None
    }
    variables = {key: value for key, value in values.items() if key in route.variables}
    extra = {key: value for key, value in values.items() if key not in route.variables}

    rendered, missing = render_segments(route.segments, variables)
    if missing:
        logger.debug("Cannot generate %r, missing %s", name, missing)
        raise RouteGenerationFailure(name, tuple(missing))

    path = _validated(route, rendered)
    url = path + suffix
    if extra:
        url += "?" + urlencode(extra)
    return _absolute(table, route, url)


def _validated(route: Route, rendered: str) -> str:
    """Return the rendered path if the route's pattern accepts it.

    A trailing separator left behind by a dropped optional segment is
    trimmed first.
    """
    candidates = [rendered]
    if route.has_optional:
        candidates.insert(0, rendered.rstrip("/") or "/")
    for candidate in candidates:
        if route.pattern.fullmatch(candidate):
            return candidate

    msg = f"Route {route.name!r} generation failed: {rendered!r} does not match {route.path!r}."
    raise RouteGenerationFailure(route.name, detail=msg)


def _absolute(table: RouteTable, route: Route, url: str) -> str:
    if not route.host:
        return url
    protocol = route.protocol or table.config.default_protocol
    return f"{protocol}://{route.host}{url}"
