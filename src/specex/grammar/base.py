"""Abstract base class for OpenAPI version grammars.

A grammar knows where a given OpenAPI major version keeps its response and
request-body examples, and where it keeps the schemas those examples must
satisfy. Both are JSONPath locator expressions, evaluated with
``jsonpath-ng`` by :func:`specex.parser.query.find`.

Concrete grammars live in :mod:`specex.grammar.v2` and
:mod:`specex.grammar.v3`; :func:`specex.grammar.determine_grammar` picks
the right one for a document.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class PathGrammar(ABC):
    """Locator expressions for one OpenAPI major version.

    Grammars are stateless; one instance per variant is shared.
    """

    @property
    @abstractmethod
    def version(self) -> str:
        """Return the major version this grammar handles (``"2"`` or ``"3"``)."""
        ...

    @abstractmethod
    def examples_locator(self) -> str:
        """Return the locator expression matching every example node."""
        ...

    @abstractmethod
    def schemas_locator(self) -> str:
        """Return the locator expression matching every schema node."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
