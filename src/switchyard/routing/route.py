"""Route, RouteSpec, RouteMatch and PathSegment frozen dataclasses."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPMethod
from types import MappingProxyType
from typing import Any

from switchyard.routing.params import DEFAULT_PATTERN


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed piece of a route path template.

    Text:     ``/users/``    (value="/users/")
    Param:    ``{id}``       (is_param=True, param_name="id")
    Typed:    ``{id:int}``   (is_param=True, param_name="id", pattern=r"\\d+")
    Optional: ``[/{page}]``  (is_optional=True, children=(...))
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    pattern: str = DEFAULT_PATTERN
    is_optional: bool = False
    children: tuple["PathSegment", ...] = ()


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A path with an explicit route name, for registration.

    A bare path string registers a route named after its prefixed path;
    use ``RouteSpec`` when the name should differ from the path::

        builder.get(RouteSpec("/users/{id}", name="users.show"), show_user)
    """

    path: str
    name: str | None = None
    host: str = ""
    protocol: str = ""


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created by ``RouteTableBuilder`` during registration. Never mutated
    afterwards; match results live in ``RouteMatch``.
    """

    method: HTTPMethod
    path: str
    handler: Any
    name: str
    regex: str
    variables: tuple[str, ...] = ()
    segments: tuple[PathSegment, ...] = field(default=(), repr=False, compare=False)
    defaults: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )
    host: str = ""
    protocol: str = ""
    middleware: tuple[Any, ...] = ()
    prefix: str = ""
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", re.compile(self.regex))

    @property
    def is_static(self) -> bool:
        """True when the template has no path variables."""
        return not self.variables

    @property
    def has_optional(self) -> bool:
        """True when the template ends with an ``[...]`` optional segment."""
        return any(seg.is_optional for seg in self.segments)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``bindings`` is built fresh for every call, so concurrent matches
    against the same route never share state.
    """

    route: Route
    bindings: dict[str, str]
