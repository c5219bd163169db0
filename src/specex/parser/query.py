"""Evaluate locator expressions against a parsed document.

Locator expressions are JSONPath, evaluated by ``jsonpath-ng`` (with its
extended parser). The version grammars in :mod:`specex.grammar` use only a
few constructs:

* ``$`` -- the document root
* ``.name`` / ``..name`` -- a child, or a node at any depth below
* ``['a','b']`` -- union of names, tried in the order written
* ``'application/json'`` -- quoting for names that are not plain
  identifiers (``/``, ``$``, ``.``)

Recursive descent is pre-order in document order: a node's own matches are
reported before matches found inside its children, and matches below an
earlier match are still reported. Callers that care about duplicates must
handle them.

Typical usage::

    for match in find(spec, "$..examples.'application/json'"):
        print(to_pointer(match.location), match.value)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, NamedTuple

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse
from jsonpath_ng.jsonpath import Child, Fields, Index, JSONPath

from specex.parser.locations import Location


class Match(NamedTuple):
    """A single query result: where it was found and what is there."""

    location: Location
    value: Any


def find(document: Any, expression: str) -> list[Match]:
    """Return every node matching *expression*, with its location.

    Raises:
        ValueError: If *expression* is not a valid locator expression.
    """
    return [
        Match(_to_location(datum.full_path), datum.value)
        for datum in compile_expression(expression).find(document)
    ]


def find_locations(document: Any, expression: str) -> list[Location]:
    """Return only the locations of the nodes matching *expression*."""
    return [match.location for match in find(document, expression)]


def find_values(document: Any, expression: str) -> list[Any]:
    """Return only the values of the nodes matching *expression*."""
    return [match.value for match in find(document, expression)]


@lru_cache(maxsize=32)
def compile_expression(expression: str) -> JSONPath:
    """Parse *expression* once; locators are reused for every document.

    Only absolute expressions are accepted.

    Raises:
        ValueError: If *expression* does not start at ``$`` or does not parse.
    """
    if not expression.startswith("$"):
        raise ValueError(f"Locator expression must start with '$': {expression!r}")
    try:
        return parse(expression)
    except JSONPathError as exc:
        raise ValueError(f"Invalid locator expression {expression!r}: {exc}") from exc


def _to_location(path: JSONPath) -> Location:
    """Flatten the ``full_path`` of a match into a location tuple."""
    if isinstance(path, Child):
        return _to_location(path.left) + _to_location(path.right)
    if isinstance(path, Fields):
        return tuple(path.fields)
    if isinstance(path, Index):
        # Recent releases keep every index of ``[0,1]`` in ``indices``.
        indices = getattr(path, "indices", None)
        return (indices[0] if indices else path.index,)
    return ()
