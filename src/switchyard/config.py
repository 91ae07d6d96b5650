"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from switchyard.errors import ConfigurationError

CHUNK_SIZE = 10


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(strict_slashes=True, namespace="app.views.")
    """

    # Dynamic routes combined into one regex before a new chunk opens
    chunk_size: int = CHUNK_SIZE

    # Prepended to handlers given as strings ("users.show" -> "app.views.users.show")
    namespace: str = ""

    # When True, "/users/" does not fall back to the static route "/users"
    strict_slashes: bool = False

    # Scheme for absolute URLs of routes bound to a host without a protocol
    default_protocol: str = "http"

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            msg = f"chunk_size must be at least 1, got {self.chunk_size}."
            raise ConfigurationError(msg)
