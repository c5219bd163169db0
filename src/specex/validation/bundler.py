"""Bundle internal ``$ref`` targets so schemas can be compiled in isolation.

OpenAPI schemas reference sibling definitions with document-relative
pointers (``{"$ref": "#/definitions/Pet"}``). A schema cut out of the
document on its own would lose those targets, so this module:

1. Walks the whole specification once and copies every internally
   referenced subtree into a private *reference bundle*, keyed by the same
   pointer and identified by :data:`ID__SPEC_SCHEMA`.
2. Registers the bundle in a :class:`referencing.Registry` for every fresh
   :class:`ValidatorEngine` the factory creates.
3. Before compiling a target schema, clones it, tags it with
   :data:`ID__SCHEMA`, and rewrites each ``#/...`` reference to
   ``<ID__SPEC_SCHEMA>#/...`` so it resolves inside the bundle.

The caller's document is never modified; only deep copies are rewritten.

Typical usage::

    create_validator = build_validator_factory(spec)
    validator = compile_validate(create_validator(), schema)
    violations = list(validator.iter_errors(example))
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Iterable

from jsonpath_ng.jsonpath import DatumInContext
from jsonpointer import JsonPointer, JsonPointerException, resolve_pointer
from jsonschema import Draft7Validator
from jsonschema.protocols import Validator
from referencing import Registry
from referencing.jsonschema import DRAFT7

from specex.output import debug
from specex.parser.query import compile_expression

PROP__ID = "$id"
PROP__REF = "$ref"
PATH__REFS = "$..'$ref'"
ID__SPEC_SCHEMA = "https://openapi-examples-validator.invalid/defs.json"
ID__SCHEMA = "https://openapi-examples-validator.invalid/schema.json"

_MISSING = object()


class ValidatorEngine:
    """Compiles schemas against a registry that already holds the bundle.

    Args:
        registry: Registry containing the reference bundle resource.
        validator_class: The ``jsonschema`` validator class to compile with.
    """

    def __init__(
        self,
        registry: Registry,
        validator_class: type[Validator] = Draft7Validator,
    ) -> None:
        self.registry = registry
        self.validator_class = validator_class

    def compile(self, schema: Any) -> Validator:
        """Check *schema* against the dialect's meta-schema and build a validator.

        Raises:
            jsonschema.exceptions.SchemaError: If *schema* is not a valid schema.
        """
        self.validator_class.check_schema(schema)
        return self.validator_class(schema, registry=self.registry)

    @property
    def bundle(self) -> Any:
        """The reference bundle the registry resolves ``<ID__SPEC_SCHEMA>#...`` against."""
        return self.registry[ID__SPEC_SCHEMA].contents


def build_validator_factory(spec: Any) -> Callable[[], ValidatorEngine]:
    """Return a factory creating engines that can resolve *spec*'s references.

    The reference bundle is built once, here; each call of the returned
    factory creates a new :class:`ValidatorEngine` with its own registry.

    Args:
        spec: The parsed specification document.
    """
    resource = DRAFT7.create_resource(_create_reference_schema(spec))

    def create_validator() -> ValidatorEngine:
        return ValidatorEngine(Registry().with_resource(ID__SPEC_SCHEMA, resource))

    return create_validator


def compile_validate(engine: ValidatorEngine, schema: Any) -> Validator:
    """Compile *schema* so that its internal references resolve via the bundle.

    Args:
        engine: An engine created by a :func:`build_validator_factory` factory.
        schema: The request/response schema the examples are validated against.

    Raises:
        jsonschema.exceptions.SchemaError: If *schema* is not a valid schema.
    """
    prepared = _prepare_schema(schema, ID__SCHEMA)
    _replace_refs_to_bundle(prepared)
    return engine.compile(prepared)


def locate_keyword(engine: ValidatorEngine, schema: Any, schema_path: Iterable[Any]) -> str:
    """Return a ``#/...`` pointer to the keyword at *schema_path*.

    *schema_path* is the ``absolute_schema_path`` of a violation raised by a
    validator compiled from *schema*. It is relative to *schema* until it
    enters a node holding a ``$ref``; from there the pointer names the
    referenced definition by its location in the specification, so a failure
    in a shared definition reads ``#/definitions/Pet/properties/id/type``.
    A ``$ref`` segment in the path, when present, is skipped.
    """
    base = ""
    parts: list[str] = []
    node = schema
    for segment in schema_path:
        seen: set[str] = set()
        ref = _internal_ref(node)
        while ref is not None and ref not in seen:
            seen.add(ref)
            base, parts = ref[1:], []
            node = resolve_pointer(engine.bundle, base, None)
            ref = _internal_ref(node)
        if seen and segment == PROP__REF:
            continue
        parts.append(str(segment))
        node = _child(node, segment)
    return "#" + base + JsonPointer.from_parts(parts).path


def _internal_ref(node: Any) -> Any:
    ref = node.get(PROP__REF) if isinstance(node, dict) else None
    if isinstance(ref, str) and ref.startswith("#/"):
        return ref
    return None


def _child(node: Any, segment: Any) -> Any:
    if isinstance(node, dict):
        return node.get(segment)
    if isinstance(node, list) and isinstance(segment, int) and 0 <= segment < len(node):
        return node[segment]
    return None


def _prepare_schema(schema: Any, schema_id: str) -> Any:
    """Deep-copy *schema* and tag it with *schema_id*."""
    prepared = copy.deepcopy(schema)
    if isinstance(prepared, dict):
        prepared[PROP__ID] = schema_id
    return prepared


def _replace_refs_to_bundle(node: Any) -> None:
    """Point every internal ``$ref`` under *node* into the bundle, in place."""
    for datum in _find_internal_refs(node):
        datum.context.value[PROP__REF] = f"{ID__SPEC_SCHEMA}{datum.value}"


def _create_reference_schema(spec: Any) -> dict[str, Any]:
    """Collect every internally referenced definition of *spec* into a new schema.

    References that point at the whole document (``#``) or that do not
    resolve are skipped; validating a schema that uses one of them fails
    later, for that schema only.
    """
    bundle: dict[str, Any] = {PROP__ID: ID__SPEC_SCHEMA}
    seen: set[str] = set()
    for ref in (datum.value for datum in _find_internal_refs(spec)):
        pointer = ref[1:]
        if not pointer or pointer in seen:
            continue
        seen.add(pointer)
        try:
            definition = resolve_pointer(spec, pointer)
            parts = JsonPointer(pointer).parts
        except JsonPointerException:
            debug(f"Skipping unresolvable reference {ref!r}")
            continue
        # Already present when an enclosing definition was copied earlier.
        if resolve_pointer(bundle, pointer, _MISSING) == definition:
            continue
        _set_in(bundle, parts, copy.deepcopy(definition))
    return bundle


def _find_internal_refs(node: Any) -> list[DatumInContext]:
    """Return the ``$ref`` matches below *node* holding a ``#...`` pointer, in document order."""
    return [
        datum
        for datum in compile_expression(PATH__REFS).find(node)
        if isinstance(datum.value, str) and datum.value.startswith("#")
    ]


def _set_in(target: dict[str, Any], parts: list[str], value: Any) -> None:
    """Set *value* at *parts* inside *target*, creating intermediate objects."""
    current = target
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value
