"""Validation engine: bundling, correlation, orchestration and mapping files.

Public entry points:

* :func:`validate` -- validate the examples embedded in a parsed document.
* :func:`validate_file` -- the same for a document loaded from a file or URL.
* :func:`validate_example` -- validate one external example file against
  one named schema.
* :func:`validate_examples_by_map` -- validate the example files listed in
  the mapping files matching a glob.

Every entry point returns a :class:`~specex.models.ValidationResponse`;
document and validation problems are reported inside it, never raised.
"""

from specex.validation.mapping import validate_examples_by_map
from specex.validation.orchestrator import validate, validate_example, validate_file

__all__ = ["validate", "validate_example", "validate_examples_by_map", "validate_file"]
