"""Document parsing -- load documents, address nodes, and query them.

This sub-package is the I/O and addressing layer underneath the validation
engine:

* :mod:`~specex.parser.loader` -- read JSON/YAML documents from a file,
  URL or stdin.
* :mod:`~specex.parser.locations` -- the :data:`Location` tuple type, its
  pointer / path-expression renderings, and single-node lookup.
* :mod:`~specex.parser.query` -- evaluate locator expressions such as
  ``$..examples.'application/json'`` into lists of matches.

Typical usage::

    from specex.parser import load_spec, find_locations, to_pointer

    spec = load_spec("openapi.json")
    for location in find_locations(spec, "$..schema"):
        print(to_pointer(location))
"""

from specex.parser.loader import load_document, load_spec
from specex.parser.locations import (
    Location,
    get_value,
    parse_location,
    resolve_reference,
    to_path_expression,
    to_pointer,
)
from specex.parser.query import Match, find, find_locations, find_values

__all__ = [
    "Location",
    "Match",
    "find",
    "find_locations",
    "find_values",
    "get_value",
    "load_document",
    "load_spec",
    "parse_location",
    "resolve_reference",
    "to_path_expression",
    "to_pointer",
]
