"""Path template parsing, compilation and rendering.

A template is literal text with ``{name}`` / ``{name:spec}`` variables and
an optional trailing ``[...]`` segment, which may nest further optional
segments::

    /users/{id:int}
    /archive/{year}[/{month}[/{day}]]

Templates are parsed once into a tuple of ``PathSegment`` and compiled into
a regex with exactly one capturing group per variable, in template order.
"""

import re

from switchyard.errors import ConfigurationError
from switchyard.routing.params import resolve_pattern
from switchyard.routing.route import PathSegment

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ANGLE_PARAM = re.compile(r"<[^<>/]+>")


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route path template into segments.

    Examples::

        "/users"              -> (PathSegment("/users"),)
        "/users/{id}"         -> (PathSegment("/users/"), PathSegment("{id}", is_param=True, ...))
        "/blog[/{page:int}]"  -> (PathSegment("/blog"), PathSegment("[/{page:int}]", is_optional=True, ...))
    """
    if "{" not in path and _ANGLE_PARAM.search(path):
        msg = (
            f"Route path {path!r} uses <param> syntax. "
            "Switchyard expects {param} placeholders, e.g. /share/{slug}."
        )
        raise ConfigurationError(msg)

    segments, _ = _parse(path, 0, nested=False)
    _check_unique_names(path, segments)
    return segments


def _parse(path: str, index: int, *, nested: bool) -> tuple[tuple[PathSegment, ...], int]:
    segments: list[PathSegment] = []
    text_start = index

    def flush(end: int) -> None:
        if end > text_start:
            segments.append(PathSegment(value=path[text_start:end]))

    while index < len(path):
        char = path[index]
        if char == "{":
            flush(index)
            end = _closing_brace(path, index)
            segments.append(_variable(path, path[index : end + 1]))
            index = text_start = end + 1
        elif char == "[":
            flush(index)
            start = index
            children, index = _parse(path, index + 1, nested=True)
            if not children:
                msg = f"Empty optional segment in route {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(value=path[start:index], is_optional=True, children=children)
            )
            text_start = index
            if index < len(path) and path[index] != "]":
                msg = f"Optional segments can only occur at the end of route {path!r}."
                raise ConfigurationError(msg)
        elif char == "]":
            if not nested:
                msg = f"Unmatched ']' in route {path!r}."
                raise ConfigurationError(msg)
            flush(index)
            return tuple(segments), index + 1
        elif char == "}":
            msg = f"Unmatched '}}' in route {path!r}."
            raise ConfigurationError(msg)
        else:
            index += 1

    if nested:
        msg = f"Unclosed '[' in route {path!r}."
        raise ConfigurationError(msg)
    flush(index)
    return tuple(segments), index


def _closing_brace(path: str, start: int) -> int:
    """Index of the ``}`` closing the variable opened at *start*.

    Inline patterns may contain balanced braces (``{code:\\d{4}}``). Braces
    that are escaped or inside a character class (``{v:[^}]+}``) do not
    count.
    """
    depth = 0
    in_class = False
    index = start
    while index < len(path):
        char = path[index]
        if char == "\\":
            index += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
            # A "]" right after "[" or "[^" is a literal member of the class
            index += 1
            if path.startswith("^", index):
                index += 1
            if path.startswith("]", index):
                index += 1
            continue
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    msg = f"Unclosed variable at position {start} in route {path!r}."
    raise ConfigurationError(msg)


def _variable(path: str, raw: str) -> PathSegment:
    inner = raw[1:-1]
    name, _, spec = inner.partition(":")
    name = name.strip()
    if not _NAME.fullmatch(name):
        msg = f"Invalid variable name {name!r} in route {path!r}."
        raise ConfigurationError(msg)
    return PathSegment(
        value=raw,
        is_param=True,
        param_name=name,
        pattern=resolve_pattern(spec.strip(), path),
    )


def _check_unique_names(path: str, segments: tuple[PathSegment, ...]) -> None:
    seen: set[str] = set()
    for name in variable_names(segments):
        if name in seen:
            msg = f"Variable {name!r} appears more than once in route {path!r}."
            raise ConfigurationError(msg)
        seen.add(name)


def variable_names(segments: tuple[PathSegment, ...]) -> list[str]:
    """Variable names in left-to-right template order, optional ones included."""
    names: list[str] = []
    for seg in segments:
        if seg.is_optional:
            names.extend(variable_names(seg.children))
        elif seg.is_param and seg.param_name:
            names.append(seg.param_name)
    return names


def compile_segments(segments: tuple[PathSegment, ...]) -> str:
    """Build the (unanchored) regex for parsed segments.

    One capturing group per variable; optional segments become
    ``(?:...)?`` so they add no groups of their own.
    """
    parts: list[str] = []
    for seg in segments:
        if seg.is_optional:
            parts.append(f"(?:{compile_segments(seg.children)})?")
        elif seg.is_param:
            parts.append(f"({seg.pattern})")
        else:
            parts.append(re.escape(seg.value))
    return "".join(parts)


def render_segments(
    segments: tuple[PathSegment, ...], values: dict[str, str]
) -> tuple[str, list[str]]:
    """Substitute *values* into segments.

    Returns the rendered text and the names of required variables that had
    no value; their placeholders are left in the text. An optional segment
    missing any of its own variables is dropped whole, together with the
    literal text it encloses. A dropped nested segment does not drop its
    parent.
    """
    parts: list[str] = []
    missing: list[str] = []
    for seg in segments:
        if seg.is_optional:
            text, inner_missing = render_segments(seg.children, values)
            if not inner_missing:
                parts.append(text)
        elif seg.is_param and seg.param_name:
            if seg.param_name in values:
                parts.append(values[seg.param_name])
            else:
                parts.append(seg.value)
                missing.append(seg.param_name)
        else:
            parts.append(seg.value)
    return "".join(parts), missing
