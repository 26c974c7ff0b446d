"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from dbpane.cli.common.output import out

USAGE_EXIT_CODE = 2


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print `message` and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc
