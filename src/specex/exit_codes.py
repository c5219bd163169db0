"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific outcome of a ``specex`` run and is
referenced by the corresponding :class:`~specex.exceptions.SpecexError`
subclass. CI pipelines can branch on the exit code without parsing stderr.

Example::

    $ specex validate openapi.json
    $ echo $?
    1   # EXIT_VALIDATION_FAILURE -- at least one example did not validate
"""

EXIT_SUCCESS = 0
"""Every example validated against its schema."""

EXIT_VALIDATION_FAILURE = 1
"""The validation response contained at least one error."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid or conflicting arguments."""
