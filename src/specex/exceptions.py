"""Exception hierarchy for specex.

All exceptions inherit from :class:`SpecexError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specex.exit_codes`
and an ``error_type`` from :class:`~specex.models.ErrorType`.

The public validation API never lets these escape: they are caught at the
boundary of the schema/example pair, mapping file or document being
processed and converted with :meth:`SpecexError.to_application_error` into
an entry of the returned :class:`~specex.models.ValidationResponse`. Only
the CLI layer maps uncaught instances to a process exit code.

Subclass hierarchy::

    SpecexError (exit 1, Error)
    +-- UnsupportedVersionError  (exit 1, UnsupportedVersion)
    +-- PathNotFoundError        (exit 1, JsonPathNotFound)
    +-- DocumentNotFoundError    (exit 1, ENOENT)
    +-- DocumentParseError       (exit 1, Error)
    +-- InvalidUsageError        (exit 2, Error)
    +-- ConfigError              (exit 1, Error)
"""

from __future__ import annotations

from typing import Any, Optional

from specex.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE
from specex.models import ApplicationError, ErrorType


class SpecexError(Exception):
    """Base exception for all specex errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
        params: Structured details copied into
            :attr:`ApplicationError.params` on conversion.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    error_type: ErrorType = ErrorType.ERROR

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        params: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.params = params
        if exit_code is not None:
            self.exit_code = exit_code

    def to_application_error(self) -> ApplicationError:
        """Convert this exception into an immutable :class:`ApplicationError`."""
        return ApplicationError(
            type=self.error_type,
            message=self.message,
            params=self.params,
        )


class UnsupportedVersionError(SpecexError):
    """Raised when a document is neither Swagger 2.x nor OpenAPI 3.x."""

    error_type = ErrorType.UNSUPPORTED_VERSION


class PathNotFoundError(SpecexError):
    """Raised when a location path does not resolve inside a document.

    Args:
        path: The location string (or rendered location) that failed.
        message: Optional message override; defaults to the schema-lookup
            wording used by the external-example workflows.
    """

    error_type = ErrorType.JSON_PATH_NOT_FOUND

    def __init__(self, path: str, message: str | None = None):
        super().__init__(
            message or f"Path to schema can't be found: '{path}'",
            params={"path": path},
        )
        self.path = path


class DocumentNotFoundError(SpecexError):
    """Raised when a spec, mapping or example file does not exist."""

    error_type = ErrorType.FILE_NOT_FOUND

    def __init__(self, path: str):
        super().__init__(
            f"No such file or directory: '{path}'",
            params={"path": path},
        )
        self.path = path


class DocumentParseError(SpecexError):
    """Raised when a document cannot be read or parsed as JSON/YAML."""


class InvalidUsageError(SpecexError):
    """Raised for invalid or conflicting CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecexError):
    """Raised for configuration problems (invalid JSON, unknown keys)."""
