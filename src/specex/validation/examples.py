"""Resolve example values and correlate them with their schemas.

Two small pieces of the validation engine live here:

* The **example resolver** -- :func:`resolve_example` reads the value at an
  example location, dereferencing ``#/...`` strings (OpenAPI 3 ``$ref``
  examples) to the referenced example's ``value``.
* The **correlator** -- :func:`derive_schema_location` maps an example
  location onto the location of the schema that governs it, and
  :func:`build_validation_map` applies that to every discovered example.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from specex.parser.locations import (
    Location,
    get_value,
    resolve_reference,
    to_pointer,
)

PROP__SCHEMA = "schema"
PROP__EXAMPLES = "examples"
PROP__VALUE = "value"


def resolve_example(location: Optional[Location], document: Any) -> Any:
    """Return the example value stored at *location*.

    A string value starting with ``#`` is treated as a reference: it is
    resolved against *document* and the target's ``value`` field is
    returned instead.

    Args:
        location: Where the example lives. ``None`` or ``()`` means the
            schema has no paired example.
        document: The parsed specification document.

    Returns:
        The example value, or ``None`` if there is no location.

    Raises:
        PathNotFoundError: If the location or a referenced example does not
            resolve.
    """
    if not location:
        return None
    return _dereference(get_value(document, location), document)


def _dereference(value: Any, document: Any) -> Any:
    if isinstance(value, str) and value.startswith("#"):
        target = resolve_reference(document, value)
        return target.get(PROP__VALUE) if isinstance(target, dict) else None
    return value


def derive_schema_location(example_location: Location) -> Location:
    """Return the schema location for *example_location*.

    The last ``examples`` segment and everything after it is replaced by a
    single ``schema`` segment::

        (..., "200", "examples", "application/json") -> (..., "200", "schema")

    Raises:
        ValueError: If *example_location* has no ``examples`` segment. The
            example locators only ever match below one, so this signals a
            caller bug rather than a document problem.
    """
    for index in range(len(example_location) - 1, -1, -1):
        if example_location[index] == PROP__EXAMPLES:
            return example_location[:index] + (PROP__SCHEMA,)
    raise ValueError(
        f"Example location has no '{PROP__EXAMPLES}' segment: "
        f"'{to_pointer(example_location)}'"
    )


def build_validation_map(example_locations: Iterable[Location]) -> dict[Location, Location]:
    """Map each derived schema location to its example location.

    When several examples derive the same schema location the one visited
    last wins, so every schema location is paired with exactly one example.
    """
    validation_map: dict[Location, Location] = {}
    for example_location in example_locations:
        validation_map[derive_schema_location(example_location)] = example_location
    return validation_map
