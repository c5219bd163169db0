"""Location paths: addressing a single node inside a parsed document.

A *location* is a tuple of segments -- ``str`` for mapping keys, ``int`` for
sequence indices -- that unambiguously addresses one node, e.g.::

    ("paths", "/", "get", "responses", "200", "schema")

Locations render to two string forms:

* a JSON pointer (RFC 6901), as used for ``examplePath`` in error output::

      /paths/~1/get/responses/200/schema

* a normalised path expression::

      $['paths']['/']['get']['responses']['200']['schema']

:func:`parse_location` accepts either form, URI-fragment pointers
(``#/paths/...``) and the dotted shorthand that users write in mapping files
(``$.paths./.get.responses.200.schema``). Only concrete locations are
accepted; wildcards, unions and recursive descent belong to
:mod:`specex.parser.query`.
"""

from __future__ import annotations

from typing import Any, Union

from jsonpointer import JsonPointer, JsonPointerException, resolve_pointer

from specex.exceptions import PathNotFoundError

Segment = Union[str, int]
Location = tuple[Segment, ...]

_QUOTES = ("'", '"')


def parse_location(expression: str) -> Location:
    """Parse a pointer or path-expression string into a :data:`Location`.

    Args:
        expression: ``/a/b``, ``#/a/b``, ``$.a.b``, ``$['a']['b']`` or the
            root-less shorthand ``a.b``.

    Returns:
        The parsed location. Pointer segments are always strings; bracketed
        integers in path expressions become ``int`` segments.

    Raises:
        PathNotFoundError: If the expression is malformed or is not a
            concrete location (wildcards, unions, recursive descent).
    """
    if expression == "" or expression.startswith("/"):
        return _parse_pointer(expression, expression)
    if expression.startswith("#"):
        return _parse_pointer(expression[1:], expression)
    if expression.startswith("$"):
        return _parse_path_expression(expression[1:], expression)
    if expression.startswith("["):
        return _parse_path_expression(expression, expression)
    return _parse_path_expression("." + expression, expression)


def to_pointer(location: Location) -> str:
    """Render *location* as a JSON pointer (``""`` for the root)."""
    return JsonPointer.from_parts([str(segment) for segment in location]).path


def to_path_expression(location: Location) -> str:
    """Render *location* as a normalised, bracketed path expression."""
    parts = ["$"]
    for segment in location:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        else:
            escaped = segment.replace("\\", "\\\\").replace("'", "\\'")
            parts.append(f"['{escaped}']")
    return "".join(parts)


def get_value(document: Any, location: Location) -> Any:
    """Return the node at *location* inside *document*.

    Mapping keys are matched as strings; sequence indices accept ``int``
    segments or digit strings (as produced by pointers).

    Raises:
        PathNotFoundError: If any segment does not exist.
    """
    current: Any = document
    for segment in location:
        if isinstance(current, dict):
            key = str(segment)
            if key not in current:
                raise _not_found(location)
            current = current[key]
        elif isinstance(current, list):
            try:
                index = int(segment)
            except ValueError:
                raise _not_found(location) from None
            if index < 0 or index >= len(current):
                raise _not_found(location)
            current = current[index]
        else:
            raise _not_found(location)
    return current


def resolve_reference(document: Any, reference: str) -> Any:
    """Resolve an internal ``#/...`` reference against *document*.

    Raises:
        PathNotFoundError: If the pointer does not resolve.
    """
    pointer = reference[1:] if reference.startswith("#") else reference
    try:
        return resolve_pointer(document, pointer)
    except JsonPointerException as exc:
        raise PathNotFoundError(
            reference, message=f"Reference can't be resolved: '{reference}'"
        ) from exc


def _not_found(location: Location) -> PathNotFoundError:
    rendered = to_path_expression(location)
    return PathNotFoundError(rendered, message=f"Path can't be found: '{rendered}'")


def _parse_pointer(pointer: str, original: str) -> Location:
    try:
        return tuple(JsonPointer(pointer).parts)
    except JsonPointerException as exc:
        raise PathNotFoundError(
            original, message=f"Invalid JSON pointer: '{original}'"
        ) from exc


def _parse_path_expression(text: str, original: str) -> Location:
    """Parse the part of a path expression that follows ``$``.

    Dotted names run until the next ``.`` or ``[``, so names such as
    ``application/json`` or ``/pets`` need no quoting. Names containing
    dots must use the bracketed form ``['a.b']``.
    """
    segments: list[Segment] = []
    i = 0
    length = len(text)
    while i < length:
        if text.startswith("..", i):
            raise _invalid(original, "recursive descent")
        char = text[i]
        if char == ".":
            end = _next_delimiter(text, i + 1)
            name = text[i + 1:end]
            if not name:
                raise _invalid(original, "empty segment")
            if name == "*":
                raise _invalid(original, "wildcard")
            segments.append(name)
            i = end
        elif char == "[":
            segment, i = _parse_bracket(text, i, original)
            segments.append(segment)
        else:
            raise _invalid(original, f"unexpected character {char!r}")
    return tuple(segments)


def _parse_bracket(text: str, start: int, original: str) -> tuple[Segment, int]:
    """Parse ``['name']`` or ``[3]`` at *start*; return the segment and next index."""
    i = start + 1
    if i < len(text) and text[i] in _QUOTES:
        quote = text[i]
        chars: list[str] = []
        i += 1
        while i < len(text) and text[i] != quote:
            if text[i] == "\\" and i + 1 < len(text):
                i += 1
            chars.append(text[i])
            i += 1
        if i >= len(text) or not text.startswith("]", i + 1):
            raise _invalid(original, "unterminated bracket")
        return "".join(chars), i + 2

    close = text.find("]", i)
    if close == -1:
        raise _invalid(original, "unterminated bracket")
    token = text[i:close].strip()
    if not token.isdigit():
        raise _invalid(original, f"unsupported selector [{token}]")
    return int(token), close + 1


def _next_delimiter(text: str, start: int) -> int:
    for i in range(start, len(text)):
        if text[i] in ".[":
            return i
    return len(text)


def _invalid(original: str, reason: str) -> PathNotFoundError:
    return PathNotFoundError(
        original, message=f"Invalid location '{original}': {reason}"
    )
