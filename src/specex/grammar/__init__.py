"""Version-specific locator grammars and the version determiner.

:func:`determine_grammar` inspects a document's top-level marker field and
returns the matching :class:`~specex.grammar.base.PathGrammar`:

* ``openapi: "3.x"`` -> :class:`~specex.grammar.v3.V3Grammar`
* ``swagger: "2.x"`` -> :class:`~specex.grammar.v2.V2Grammar`

Anything else raises :class:`~specex.exceptions.UnsupportedVersionError`.
"""

from __future__ import annotations

from typing import Any

from specex.exceptions import UnsupportedVersionError
from specex.grammar.base import PathGrammar
from specex.grammar.v2 import V2Grammar
from specex.grammar.v3 import V3Grammar

__all__ = ["PathGrammar", "V2Grammar", "V3Grammar", "determine_grammar"]

_V2 = V2Grammar()
_V3 = V3Grammar()


def determine_grammar(document: Any) -> PathGrammar:
    """Select the grammar for *document* from its version marker.

    The ``openapi`` marker is checked before ``swagger``. A marker whose
    major version is not the expected one is rejected rather than guessed.

    Args:
        document: The parsed specification document.

    Returns:
        The shared grammar instance for the document's major version.

    Raises:
        UnsupportedVersionError: If neither marker is present or the version
            is not a recognised major version.
    """
    if not isinstance(document, dict):
        raise UnsupportedVersionError(
            "Specification must be a JSON object with an 'openapi' or 'swagger' field"
        )

    if "openapi" in document:
        version = str(document["openapi"])
        if version.startswith("3."):
            return _V3
        raise UnsupportedVersionError(
            f"Unsupported OpenAPI version: {version}", params={"version": version}
        )

    if "swagger" in document:
        version = str(document["swagger"])
        if version.startswith("2."):
            return _V2
        raise UnsupportedVersionError(
            f"Unsupported Swagger version: {version}", params={"version": version}
        )

    raise UnsupportedVersionError(
        "Missing 'openapi' or 'swagger' field. Is this an OpenAPI document?"
    )
