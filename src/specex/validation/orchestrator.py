"""Validation orchestrator: drive a full pass over schema/example pairs.

The pass is driven by the schema locations the version grammar finds, so
schemas without any example are still visited and reported. Each pair is
classified by :func:`validate_pair`:

======================  ======================  ===================================
schema                  example                 outcome
======================  ======================  ===================================
absent                  absent                  dropped from the count, no error
present                 absent                  "Schema ... is missing examples."
absent                  present                 "Example ... is missing a schema."
present                 present                 validated; one error per violation
======================  ======================  ===================================

Problems are collected as :class:`~specex.models.ApplicationError` values;
nothing here raises for a bad document, file or example.
"""

from __future__ import annotations

import re
from typing import Any, Callable, NamedTuple, Optional

from jsonpointer import JsonPointer
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as SchemaViolation
from referencing.exceptions import Unresolvable

from specex.exceptions import PathNotFoundError, SpecexError
from specex.grammar import PathGrammar, determine_grammar
from specex.models import (
    ApplicationError,
    ErrorType,
    ValidationResponse,
    ValidationStatistics,
)
from specex.output import debug
from specex.parser.loader import load_document, load_spec
from specex.parser.locations import Location, get_value, parse_location, to_pointer
from specex.parser.query import find_locations
from specex.validation.bundler import (
    ValidatorEngine,
    build_validator_factory,
    compile_validate,
    locate_keyword,
)
from specex.validation.examples import build_validation_map, resolve_example

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def validate(document: Any) -> ValidationResponse:
    """Validate every embedded example of an in-memory specification.

    Args:
        document: The parsed Swagger 2.x or OpenAPI 3.x document. It is
            never modified.

    Returns:
        The aggregated response. An unsupported document yields a single
        ``UnsupportedVersion`` error.
    """
    try:
        grammar = determine_grammar(document)
    except SpecexError as exc:
        return ValidationResponse.from_errors([exc.to_application_error()])
    debug(f"Using {grammar!r}")

    correlations = correlate(document, grammar)
    statistics = ValidationStatistics(
        schemas_with_examples=sum(1 for item in correlations if item.declared)
    )
    create_validator = build_validator_factory(document)
    errors: list[ApplicationError] = []

    for schema_location, example_location, _ in correlations:
        schema = _get_optional(document, schema_location)
        if example_location is None:
            errors.extend(
                validate_pair(
                    create_validator,
                    statistics,
                    schema,
                    schema_location=schema_location,
                )
            )
            continue
        try:
            example = resolve_example(example_location, document)
        except SpecexError as exc:
            statistics.examples_total += 1
            errors.append(
                exc.to_application_error().annotate(example_path=to_pointer(example_location))
            )
            continue
        errors.extend(
            validate_pair(
                create_validator,
                statistics,
                schema,
                example,
                has_example=True,
                schema_location=schema_location,
                example_location=example_location,
            )
        )

    return ValidationResponse.from_errors(errors, statistics)


class Correlation(NamedTuple):
    """A schema location and the example location paired with it."""

    schema_location: Location
    example_location: Optional[Location]
    declared: bool
    """Whether the schemas locator found the schema location itself."""


def correlate(document: Any, grammar: PathGrammar) -> list[Correlation]:
    """Pair the schema locations of *document* with their example locations.

    Schema locations found by the grammar come first, in traversal order and
    without duplicates. Example locations whose derived schema location was
    not found follow, in example traversal order.
    """
    schema_locations = list(dict.fromkeys(find_locations(document, grammar.schemas_locator())))
    validation_map = build_validation_map(find_locations(document, grammar.examples_locator()))
    debug(
        f"Found {len(schema_locations)} schema location(s) and "
        f"{len(validation_map)} example location(s)"
    )

    correlations = [
        Correlation(location, validation_map.get(location), True)
        for location in schema_locations
    ]
    declared = set(schema_locations)
    correlations.extend(
        Correlation(schema_location, example_location, False)
        for schema_location, example_location in validation_map.items()
        if schema_location not in declared
    )
    return correlations


def validate_file(file_path: str) -> ValidationResponse:
    """Load *file_path* and validate its embedded examples.

    Read and parse failures are returned as a single error entry.
    """
    try:
        document = load_spec(file_path)
    except SpecexError as exc:
        return ValidationResponse.from_errors([exc.to_application_error()])
    return validate(document)


def validate_example(
    spec_file_path: str,
    schema_location: str,
    example_file_path: str,
) -> ValidationResponse:
    """Validate one external example file against one schema of a spec file.

    Args:
        spec_file_path: The specification file.
        schema_location: Pointer or path expression addressing the schema,
            e.g. ``$.paths./.get.responses.200.schema``.
        example_file_path: The JSON/YAML file holding the example.

    Returns:
        The response. A schema location that does not resolve is reported
        as a single ``JsonPathNotFound`` error.
    """
    try:
        document = load_spec(spec_file_path)
        schema = extract_schema(document, schema_location)
    except SpecexError as exc:
        return ValidationResponse.from_errors([exc.to_application_error()])

    statistics = ValidationStatistics(schemas_with_examples=1)
    errors = validate_example_file(
        build_validator_factory(document), statistics, schema, example_file_path
    )
    return ValidationResponse.from_errors(errors, statistics)


def extract_schema(document: Any, schema_location: str) -> Any:
    """Return the schema *schema_location* addresses inside *document*.

    Raises:
        PathNotFoundError: If the location is malformed or does not resolve.
            The error always names *schema_location* as given by the user.
    """
    try:
        return get_value(document, parse_location(schema_location))
    except PathNotFoundError as exc:
        raise PathNotFoundError(schema_location) from exc


def validate_example_file(
    create_validator: Callable[[], ValidatorEngine],
    statistics: ValidationStatistics,
    schema: Any,
    example_file_path: str,
) -> list[ApplicationError]:
    """Load an external example and validate it against *schema*.

    A file that cannot be loaded produces one error and leaves the counters
    untouched.
    """
    try:
        example = load_document(example_file_path)
    except SpecexError as exc:
        return [exc.to_application_error()]
    return validate_pair(
        create_validator,
        statistics,
        schema,
        example,
        has_example=True,
        example_file_path=example_file_path,
    )


def validate_pair(
    create_validator: Callable[[], ValidatorEngine],
    statistics: ValidationStatistics,
    schema: Any,
    example: Any = None,
    *,
    has_example: bool = False,
    schema_location: Location = (),
    example_location: Optional[Location] = None,
    example_file_path: Optional[str] = None,
) -> list[ApplicationError]:
    """Classify one schema/example pair, update *statistics* and validate it.

    Args:
        create_validator: Factory from
            :func:`~specex.validation.bundler.build_validator_factory`.
        statistics: Counters of the running pass, updated in place.
        schema: The schema value, ``None`` when there is none.
        example: The example value; only meaningful with *has_example*.
        has_example: Whether an example was found for this pair. A JSON
            ``null`` example is still an example.
        schema_location: Where the schema lives, for error messages.
        example_location: Where the example lives inside the document.
        example_file_path: The external file the example was read from.

    Returns:
        The errors for this pair, in validator order.
    """
    if not has_example:
        statistics.schemas_with_examples -= 1
        if schema is None:
            return []
        pointer = to_pointer(schema_location)
        return [
            ApplicationError(
                type=ErrorType.VALIDATION,
                message=f"Schema {pointer} is missing examples.",
                params={"path": pointer},
            )
        ]

    statistics.examples_total += 1
    origin: dict[str, Any] = {}
    if example_location is not None:
        origin["example_path"] = to_pointer(example_location)
    if example_file_path is not None:
        origin["example_file_path"] = example_file_path

    if schema is None:
        statistics.examples_without_schema += 1
        described = origin.get("example_path") or example_file_path
        return [
            ApplicationError(
                type=ErrorType.VALIDATION,
                message=f"Example {described} is missing a schema.",
                params={"path": described},
                **origin,
            )
        ]

    try:
        engine = create_validator()
        validator = compile_validate(engine, schema)
        violations = list(validator.iter_errors(example))
    except SchemaError as exc:
        return [
            ApplicationError(
                type=ErrorType.ERROR,
                message=f"Invalid schema {to_pointer(schema_location)}: {exc.message}",
                **origin,
            )
        ]
    except Unresolvable as exc:
        return [
            ApplicationError(
                type=ErrorType.ERROR,
                message=f"Unresolvable reference in schema {to_pointer(schema_location)}: {exc}",
                **origin,
            )
        ]
    return [
        convert_violation(
            violation, locate_keyword(engine, schema, violation.absolute_schema_path)
        ).annotate(**origin)
        for violation in violations
    ]


def convert_violation(
    violation: SchemaViolation, schema_path: Optional[str] = None
) -> ApplicationError:
    """Turn a ``jsonschema`` validation error into an :class:`ApplicationError`.

    *schema_path* overrides the pointer built from the violation's own
    ``absolute_schema_path``, which runs through ``$ref`` keywords.
    """
    return ApplicationError(
        type=ErrorType.VALIDATION,
        message=violation.message,
        data_path=_format_data_path(violation.absolute_path),
        schema_path=schema_path or "#" + _format_pointer(violation.absolute_schema_path),
        keyword=str(violation.validator),
        params=_violation_params(violation),
    )


def _violation_params(violation: SchemaViolation) -> dict[str, Any]:
    if violation.validator == "required" and isinstance(violation.validator_value, list):
        for name in violation.validator_value:
            if violation.message.startswith(f"{name!r} "):
                return {"missingProperty": name}
    return {str(violation.validator): violation.validator_value}


def _format_data_path(path: Any) -> str:
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif _IDENTIFIER.match(segment):
            parts.append(f".{segment}")
        else:
            escaped = segment.replace("\\", "\\\\").replace("'", "\\'")
            parts.append(f"['{escaped}']")
    return "".join(parts)


def _format_pointer(path: Any) -> str:
    return JsonPointer.from_parts([str(part) for part in path]).path


def _get_optional(document: Any, location: Location) -> Any:
    try:
        return get_value(document, location)
    except PathNotFoundError:
        return None
