"""Switchyard exception hierarchy.

Shared across the builder, matcher, and URL generator so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a route or router configuration is invalid.

    Typically raised by ``RouteTableBuilder.add_route()`` at startup,
    never while matching.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    The caller decides how to surface it; ``status`` is the suggested
    response code.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path, or no route has the name.

    ``target`` is the path (when matching) or the route name (when
    generating a URL).
    """

    def __init__(self, target: str, detail: str = "") -> None:
        super().__init__(status=404, detail=detail or f"No route matches {target!r}")
        object.__setattr__(self, "target", target)


class RouteGenerationFailure(HTTPError):  # noqa: N818
    """500: a URL could not be generated for a named route.

    Raised when required path variables are missing or a supplied value
    does not satisfy the variable's pattern. Indicates a caller bug.
    """

    def __init__(self, name: str, missing: tuple[str, ...] = (), detail: str = "") -> None:
        if not detail:
            if missing:
                detail = (
                    f"Route {name!r} generation failed. "
                    f"Set values for path variables: {', '.join(missing)}"
                )
            else:
                detail = f"Route {name!r} generation failed."
        super().__init__(status=500, detail=detail)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "missing", missing)
