"""specex -- Validate the examples of Swagger 2.x and OpenAPI 3.x documents.

Examples embedded in a specification drift away from their schemas unless
something checks them. specex finds every ``application/json`` example,
pairs it with the schema that governs it and validates it as JSON Schema.
External example files can be checked too, either one at a time or through
mapping files that list the examples for each schema.

Typical usage::

    specex validate openapi.json
    specex validate openapi.json -m "examples/**/map.json" -c

or from Python::

    from specex import validate_file

    response = validate_file("openapi.json")
    if not response.valid:
        for error in response.errors:
            print(error.message)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for results and configuration.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from specex.models import ApplicationError, ErrorType, ValidationResponse, ValidationStatistics
from specex.validation import (
    validate,
    validate_example,
    validate_examples_by_map,
    validate_file,
)

__all__ = [
    "ApplicationError",
    "ErrorType",
    "ValidationResponse",
    "ValidationStatistics",
    "__version__",
    "validate",
    "validate_example",
    "validate_examples_by_map",
    "validate_file",
]
