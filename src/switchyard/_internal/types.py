"""Shared type aliases used across switchyard modules."""

from collections.abc import MutableMapping
from typing import Any, TypeAlias

# Route handler, opaque to the router (a callable or a dotted string)
Handler: TypeAlias = Any

# One middleware entry, a list of them, or None
MiddlewareSpec: TypeAlias = Any

# Raw ASGI scope
Scope: TypeAlias = MutableMapping[str, Any]
