"""The finalized, read-only route table.

Produced by ``RouteTableBuilder.build()``. Every container is frozen, so a
table can be shared by any number of threads without locking.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from switchyard.config import RouterConfig
from switchyard.routing.route import Route, RouteMatch


@dataclass(frozen=True, slots=True)
class Chunk:
    """Up to ``chunk_size`` dynamic routes combined into one alternation.

    ``routes`` maps a discriminator to the route whose alternative
    produced it. The discriminator is the number of the terminal empty
    group of each alternative, which is ``Match.lastindex`` after a
    successful full match.
    """

    pattern: re.Pattern[str]
    routes: Mapping[int, Route]

    def __len__(self) -> int:
        return len(self.routes)


@dataclass(frozen=True, slots=True)
class RouteTable:
    """Static map, dynamic chunks and alias index for matching and URL generation.

    Usage::

        table = builder.build()
        match = table.match("GET", "/users/42")
        url = table.url_for("users.show", {"id": "42"})
    """

    config: RouterConfig
    static_routes: Mapping[str, Mapping[str, Route]]
    dynamic_chunks: Mapping[str, tuple[Chunk, ...]]
    aliases: Mapping[tuple[str, str], Route]
    names: Mapping[str, Route]
    routes: tuple[Route, ...]

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve *method* and *path*. Raises ``RouteNotFound``."""
        from switchyard.routing.matcher import match

        return match(self, method, path)

    def url_for(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        format: str | None = None,  # noqa: A002
    ) -> str:
        """Generate a URL for the route named *name*."""
        from switchyard.routing.urls import generate_url

        return generate_url(self, name, params, format)

    def get_route(self, name: str, method: str | None = None) -> Route | None:
        """Look up a route by name, optionally for one method."""
        if method is None:
            return self.names.get(name)
        return self.aliases.get((method.upper(), name))

    def __repr__(self) -> str:
        chunk_count = sum(len(chunks) for chunks in self.dynamic_chunks.values())
        return f"<RouteTable routes={len(self.routes)} chunks={chunk_count}>"


def get_route(table: RouteTable, name: str, method: str | None = None) -> Route | None:
    """Return the route registered under *name*, or ``None``.

    Without *method*, the first route registered under the name wins.
    """
    return table.get_route(name, method)
