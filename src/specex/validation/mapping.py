"""Validate external example files listed in mapping files.

A mapping file is a JSON/YAML object whose keys address schemas inside the
specification and whose values name the example files for that schema::

    {
        "$.paths./.get.responses.200.schema": "examples/list.json",
        "/paths/~1pets/post/parameters/0/schema": ["new-pet.json", "other.json"]
    }

:func:`validate_examples_by_map` expands a glob to mapping files, validates
each one on its own and merges the per-file responses in glob order.
"""

from __future__ import annotations

import glob
import os
from typing import Any

from specex.exceptions import SpecexError
from specex.models import (
    ApplicationError,
    ErrorType,
    ValidationResponse,
    ValidationStatistics,
)
from specex.output import debug
from specex.parser.loader import load_spec
from specex.validation.bundler import build_validator_factory
from specex.validation.orchestrator import extract_schema, validate_example_file


def expand_glob(pattern: str, nonull: bool = False) -> list[str]:
    """Return the paths matching *pattern*, sorted.

    ``**`` matches across directories. With *nonull*, a pattern that matches
    nothing is returned as the only entry, so that callers report the
    missing file instead of silently validating nothing.
    """
    paths = sorted(glob.glob(pattern, recursive=True))
    if not paths and nonull:
        return [pattern]
    return paths


def validate_examples_by_map(
    spec_file_path: str,
    mapping_glob: str,
    cwd_to_mapping_file: bool = False,
) -> ValidationResponse:
    """Validate every example listed in the mapping files matching *mapping_glob*.

    Args:
        spec_file_path: The specification file the mapping keys point into.
        mapping_glob: Glob pattern selecting the mapping files.
        cwd_to_mapping_file: Resolve example paths relative to the directory
            of the mapping file that lists them instead of the current
            working directory.

    Returns:
        The merged response. ``matchingFilePathsMapping`` counts the mapping
        files that could be opened.
    """
    mapping_files = expand_glob(mapping_glob, nonull=True)
    debug(f"Mapping files for {mapping_glob!r}: {mapping_files}")
    return ValidationResponse.merge(
        _validate_mapping_file(spec_file_path, mapping_file, cwd_to_mapping_file)
        for mapping_file in mapping_files
    )


def _validate_mapping_file(
    spec_file_path: str,
    mapping_file: str,
    cwd_to_mapping_file: bool,
) -> ValidationResponse:
    try:
        mapping = load_spec(mapping_file)
    except SpecexError as exc:
        return ValidationResponse.from_errors(
            [exc.to_application_error()],
            ValidationStatistics(matching_file_paths_mapping=0),
        )

    statistics = ValidationStatistics(
        schemas_with_examples=len(mapping),
        matching_file_paths_mapping=1,
    )
    try:
        document = load_spec(spec_file_path)
    except SpecexError as exc:
        return ValidationResponse.from_errors([exc.to_application_error()], statistics)

    create_validator = build_validator_factory(document)
    base_dir = os.path.dirname(mapping_file) if cwd_to_mapping_file else ""
    errors: list[ApplicationError] = []

    for schema_location, example_files in mapping.items():
        try:
            schema = extract_schema(document, schema_location)
        except SpecexError as exc:
            errors.append(exc.to_application_error())
            continue
        for example_file in _as_list(example_files):
            if not isinstance(example_file, str):
                errors.append(
                    ApplicationError(
                        type=ErrorType.ERROR,
                        message=(
                            f"Example file for '{schema_location}' must be a path, "
                            f"got {type(example_file).__name__}"
                        ),
                        params={"path": schema_location},
                    )
                )
                continue
            errors.extend(
                validate_example_file(
                    create_validator,
                    statistics,
                    schema,
                    os.path.join(base_dir, example_file),
                )
            )

    debug(f"{mapping_file}: {len(errors)} error(s)")
    return ValidationResponse.from_errors(
        [error.annotate(map_file_path=mapping_file) for error in errors],
        statistics,
    )


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else [value]
