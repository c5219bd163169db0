"""Inspect commands -- show how a specification's examples are correlated.

Provides the ``specex inspect`` sub-command group with read-only commands
for debugging example discovery. Nothing is validated.
"""

from __future__ import annotations

import typer

from specex.output import debug, error, print_table

inspect_app = typer.Typer(no_args_is_help=True)

_NO_EXAMPLE = "-"


@inspect_app.command("locations")
def inspect_locations(
    spec: str = typer.Argument(
        help="Path or URL of the OpenAPI/Swagger document ('-' for stdin)."
    ),
) -> None:
    """List schema locations and the example paired with each.

    Schemas without an example show ``-``; examples whose schema does not
    exist are listed after the schemas found in the document.

    Example::

        specex inspect locations openapi.json
        specex --json inspect locations openapi.json
    """
    from specex.exceptions import SpecexError
    from specex.grammar import determine_grammar
    from specex.parser import load_spec, to_pointer
    from specex.validation.orchestrator import correlate

    try:
        document = load_spec(spec)
        grammar = determine_grammar(document)
    except SpecexError as exc:
        error(exc.message)
        raise typer.Exit(code=exc.exit_code) from None
    debug(f"Using {grammar!r}")

    rows = [
        [
            to_pointer(item.schema_location),
            to_pointer(item.example_location) if item.example_location is not None else _NO_EXAMPLE,
            "yes" if item.declared else "no",
        ]
        for item in correlate(document, grammar)
    ]
    print_table(["Schema", "Example", "Schema found"], rows, title=f"Locations ({grammar.version})")
