"""Grammar for Swagger 2.0 documents.

Swagger 2.0 keeps response examples keyed by MIME type next to the
response's ``schema``::

    responses:
      200:
        schema: {...}
        examples:
          application/json: {...}
"""

from __future__ import annotations

from specex.grammar.base import PathGrammar

PATH__EXAMPLES = "$..examples.'application/json'"
PATH__SCHEMAS = "$..schema"


class V2Grammar(PathGrammar):
    """Locators for Swagger 2.0."""

    @property
    def version(self) -> str:
        return "2"

    def examples_locator(self) -> str:
        return PATH__EXAMPLES

    def schemas_locator(self) -> str:
        return PATH__SCHEMAS
