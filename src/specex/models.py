"""Canonical Pydantic models shared across all specex modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Result models** -- returned by every public entry point and rendered by the
CLI:
    :class:`ErrorType`, :class:`ApplicationError`,
    :class:`ValidationStatistics`, and :class:`ValidationResponse`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

Result models serialise with camelCase aliases (``dataPath``,
``examplesTotal``, ...) so that the JSON output of ``specex validate --json``
matches the field names used by other OpenAPI example validators.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


# --- Result models ---


class ErrorType(str, enum.Enum):
    """Category of an :class:`ApplicationError`.

    The values double as the ``type`` field in serialised output.
    """

    VALIDATION = "Validation"
    JSON_PATH_NOT_FOUND = "JsonPathNotFound"
    FILE_NOT_FOUND = "ENOENT"
    UNSUPPORTED_VERSION = "UnsupportedVersion"
    ERROR = "Error"


class ApplicationError(BaseModel):
    """A single problem found while validating examples.

    Instances are immutable. Aggregation layers that need to attach more
    context (the example file an error came from, the mapping file that
    referenced it) call :meth:`annotate`, which returns a new error rather
    than modifying this one.

    Example::

        ApplicationError(
            type=ErrorType.VALIDATION,
            message="1 is not of type 'string'",
            data_path=".versions[0].id",
            schema_path="#/properties/versions/items/properties/id/type",
            keyword="type",
            params={"type": "string"},
        )
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    type: ErrorType
    message: str
    data_path: Optional[str] = None
    schema_path: Optional[str] = None
    keyword: Optional[str] = None
    params: Optional[dict[str, Any]] = None
    example_path: Optional[str] = Field(
        default=None, description="Pointer to the example inside the spec document"
    )
    example_file_path: Optional[str] = Field(
        default=None, description="Path of the external example file"
    )
    map_file_path: Optional[str] = Field(
        default=None, description="Path of the mapping file that referenced the example"
    )

    def annotate(self, **fields: Any) -> ApplicationError:
        """Return a copy of this error with *fields* set."""
        return self.model_copy(update=fields)


class ValidationStatistics(BaseModel):
    """Running counters collected during a validation pass.

    The counters are adjusted incrementally by the orchestrator. Assignment
    is validated, so driving any counter below zero raises immediately.
    ``matching_file_paths_mapping`` is only populated by
    :func:`~specex.validation.mapping.validate_examples_by_map`.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    schemas_with_examples: int = Field(default=0, ge=0)
    examples_total: int = Field(default=0, ge=0)
    examples_without_schema: int = Field(default=0, ge=0)
    matching_file_paths_mapping: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def merge(cls, statistics: Iterable[ValidationStatistics]) -> ValidationStatistics:
        """Sum *statistics* field by field into a new instance."""
        merged = cls()
        for item in statistics:
            merged.schemas_with_examples += item.schemas_with_examples
            merged.examples_total += item.examples_total
            merged.examples_without_schema += item.examples_without_schema
            if item.matching_file_paths_mapping is not None:
                merged.matching_file_paths_mapping = (
                    merged.matching_file_paths_mapping or 0
                ) + item.matching_file_paths_mapping
        return merged


class ValidationResponse(BaseModel):
    """Aggregate result returned by every public entry point.

    ``valid`` is derived from ``errors`` and is therefore always consistent
    with it. The response is frozen; callers own it once returned.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    statistics: ValidationStatistics = Field(default_factory=ValidationStatistics)
    errors: list[ApplicationError] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        """``True`` when no errors were collected."""
        return not self.errors

    @classmethod
    def from_errors(
        cls,
        errors: list[ApplicationError],
        statistics: Optional[ValidationStatistics] = None,
    ) -> ValidationResponse:
        """Build a response around *errors*, with empty statistics by default."""
        return cls(
            statistics=statistics if statistics is not None else ValidationStatistics(),
            errors=list(errors),
        )

    @classmethod
    def merge(cls, responses: Iterable[ValidationResponse]) -> ValidationResponse:
        """Combine *responses* into one.

        Error lists are concatenated in the order given and statistics are
        summed field-wise via :meth:`ValidationStatistics.merge`.
        """
        responses = list(responses)
        errors: list[ApplicationError] = []
        for response in responses:
            errors.extend(response.errors)
        statistics = ValidationStatistics.merge(r.statistics for r in responses)
        return cls(statistics=statistics, errors=errors)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Configuration models ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specex/config.json``.

    Loaded and saved by :func:`~specex.config.load_global_config` and
    :func:`~specex.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specex.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    cwd_to_mapping_file: bool = Field(
        default=False,
        description="Resolve example paths relative to their mapping file",
    )
