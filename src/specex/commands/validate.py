"""Validate command -- check the examples of a specification.

``specex validate`` dispatches to one of the three validation workflows
depending on the options given:

* no options -- the examples embedded in the specification
  (:func:`~specex.validation.validate_file`)
* ``-s`` and ``-e`` -- one external example file against one schema
  (:func:`~specex.validation.validate_example`)
* ``-m`` -- the example files listed in mapping files
  (:func:`~specex.validation.validate_examples_by_map`)

Statistics are printed to stdout and every error to stderr. The command
exits with status 1 when any error was found.
"""

from __future__ import annotations

from typing import Optional

import typer

from specex.exceptions import InvalidUsageError
from specex.exit_codes import EXIT_VALIDATION_FAILURE
from specex.models import ValidationResponse
from specex.output import debug, error, report_response


def validate_command(
    spec: str = typer.Argument(
        help="Path or URL of the OpenAPI/Swagger document ('-' for stdin)."
    ),
    schema_jsonpath: Optional[str] = typer.Option(
        None,
        "--schema-jsonpath",
        "-s",
        help="Location of the schema to validate an external example against.",
    ),
    example_filepath: Optional[str] = typer.Option(
        None,
        "--example-filepath",
        "-e",
        help="External example file to validate (requires --schema-jsonpath).",
    ),
    mapping_filepath: Optional[str] = typer.Option(
        None,
        "--mapping-filepath",
        "-m",
        help="Glob of mapping files listing external examples per schema.",
    ),
    cwd_to_mapping_file: bool = typer.Option(
        False,
        "--cwd-to-mapping-file",
        "-c",
        help="Resolve example paths relative to their mapping file.",
    ),
) -> None:
    """Validate the examples of an OpenAPI document.

    Example::

        specex validate openapi.json
        specex validate openapi.json -s '$.paths./.get.responses.200.schema' -e example.json
        specex validate openapi.json -m 'examples/**/map.json' -c
        specex --json validate openapi.json
    """
    try:
        _check_options(schema_jsonpath, example_filepath, mapping_filepath, cwd_to_mapping_file)
    except InvalidUsageError as exc:
        error(exc.message)
        raise typer.Exit(code=exc.exit_code) from None

    response = _run(spec, schema_jsonpath, example_filepath, mapping_filepath, cwd_to_mapping_file)
    report_response(response)
    if not response.valid:
        raise typer.Exit(code=EXIT_VALIDATION_FAILURE)


def _check_options(
    schema_jsonpath: Optional[str],
    example_filepath: Optional[str],
    mapping_filepath: Optional[str],
    cwd_to_mapping_file: bool,
) -> None:
    """Reject option combinations that do not select exactly one workflow.

    Raises:
        InvalidUsageError: If the options conflict or are incomplete.
    """
    single = schema_jsonpath is not None or example_filepath is not None
    if mapping_filepath is not None and single:
        raise InvalidUsageError(
            "--mapping-filepath cannot be combined with --schema-jsonpath/--example-filepath"
        )
    if single and (schema_jsonpath is None or example_filepath is None):
        raise InvalidUsageError(
            "--schema-jsonpath and --example-filepath must be given together"
        )
    if cwd_to_mapping_file and mapping_filepath is None:
        raise InvalidUsageError("--cwd-to-mapping-file requires --mapping-filepath")


def _run(
    spec: str,
    schema_jsonpath: Optional[str],
    example_filepath: Optional[str],
    mapping_filepath: Optional[str],
    cwd_to_mapping_file: bool,
) -> ValidationResponse:
    from specex.config import resolve_config
    from specex.validation import (
        validate_example,
        validate_examples_by_map,
        validate_file,
    )

    if mapping_filepath is not None:
        config = resolve_config(cli_cwd_to_mapping_file=cwd_to_mapping_file or None)
        debug(f"Validating examples of {spec} listed in {mapping_filepath}")
        return validate_examples_by_map(
            spec, mapping_filepath, cwd_to_mapping_file=config.cwd_to_mapping_file
        )
    if schema_jsonpath is not None and example_filepath is not None:
        debug(f"Validating {example_filepath} against {schema_jsonpath} of {spec}")
        return validate_example(spec, schema_jsonpath, example_filepath)
    debug(f"Validating embedded examples of {spec}")
    return validate_file(spec)
