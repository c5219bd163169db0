"""Grammar for OpenAPI 3.x documents.

OpenAPI 3 moves schemas and examples under a media-type object, for both
responses and request bodies. Each named example carries its payload in
``value``, or points to a shared example through ``$ref``::

    responses:
      200:
        content:
          application/json:
            schema: {...}
            examples:
              first:
                value: {...}
              second:
                $ref: '#/components/examples/Second'
"""

from __future__ import annotations

from specex.grammar.base import PathGrammar

PATH__EXAMPLES = (
    "$..['responses','requestBody']..content.'application/json'.examples..['value','$ref']"
)
PATH__SCHEMAS = "$..['responses','requestBody']..content.'application/json'.schema"


class V3Grammar(PathGrammar):
    """Locators for OpenAPI 3.0 and 3.1."""

    @property
    def version(self) -> str:
        return "3"

    def examples_locator(self) -> str:
        return PATH__EXAMPLES

    def schemas_locator(self) -> str:
        return PATH__SCHEMAS
