"""Switchyard: route matching and URL generation for HTTP services.

Routes are registered on a builder during startup and frozen into an
immutable table that any number of threads can match against.

Basic usage::

    from switchyard import RouteSpec, RouteTableBuilder

    builder = RouteTableBuilder()
    builder.get(RouteSpec("/users/{id:int}", name="users.show"), show_user)
    table = builder.build()

    match = table.match("GET", "/users/42")     # match.bindings == {"id": "42"}
    table.url_for("users.show", {"id": 42})     # "/users/42"
"""

from importlib import import_module

__version__ = "0.1.0-dev"
__all__ = [
    "CHUNK_SIZE",
    "ConfigurationError",
    "HTTPError",
    "Route",
    "RouteGenerationFailure",
    "RouteMatch",
    "RouteNotFound",
    "RouteSpec",
    "RouteTable",
    "RouteTableBuilder",
    "RouterConfig",
    "SwitchyardError",
    "generate_url",
    "get_route",
    "match",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "CHUNK_SIZE": "switchyard.config",
    "RouterConfig": "switchyard.config",
    "ConfigurationError": "switchyard.errors",
    "HTTPError": "switchyard.errors",
    "RouteGenerationFailure": "switchyard.errors",
    "RouteNotFound": "switchyard.errors",
    "SwitchyardError": "switchyard.errors",
    "Route": "switchyard.routing.route",
    "RouteMatch": "switchyard.routing.route",
    "RouteSpec": "switchyard.routing.route",
    "RouteTable": "switchyard.routing.table",
    "get_route": "switchyard.routing.table",
    "RouteTableBuilder": "switchyard.routing.builder",
    "match": "switchyard.routing.matcher",
    "generate_url": "switchyard.routing.urls",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(import_module(module_name), name)
