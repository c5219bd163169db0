"""Built-in CLI commands.

Each module exposes either a single Typer command function or a
``typer.Typer`` sub-application that :mod:`specex.app` registers at import
time:

* :mod:`~specex.commands.validate` -- ``specex validate``
* :mod:`~specex.commands.inspect` -- ``specex inspect``
* :mod:`~specex.commands.config` -- ``specex config``
"""
