"""Path variable patterns.

Built-in converters for route path variables like ``{id:int}``. Anything
after the colon that is not a converter name is used as an inline regex.
"""

import re

from switchyard.errors import ConfigurationError

# Pattern for a bare ``{name}`` variable: one path segment
DEFAULT_PATTERN = r"[^/]+"

CONVERTERS: dict[str, str] = {
    "str": DEFAULT_PATTERN,
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
    "slug": r"[A-Za-z0-9_-]+",
    "uuid": r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}",
}


def resolve_pattern(spec: str | None, path: str) -> str:
    """Return the regex for a variable's ``:spec`` part.

    Converter names map to their pattern; any other text is validated as
    an inline regex, compiled the way it will be embedded in the route
    pattern. Inline patterns must not contain capturing groups, since
    capture numbering is what ties captures to variable names.
    """
    if not spec:
        return DEFAULT_PATTERN
    if spec in CONVERTERS:
        return CONVERTERS[spec]
    try:
        compiled = re.compile(f"({spec})")
    except re.error as exc:
        msg = f"Invalid pattern {spec!r} in route {path!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if compiled.groups > 1:
        msg = (
            f"Pattern {spec!r} in route {path!r} contains capturing groups. "
            "Use non-capturing groups (?:...) instead."
        )
        raise ConfigurationError(msg)
    return spec
