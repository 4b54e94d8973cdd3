"""Shared utilities for the CLI"""

from __future__ import annotations

import logging
import os
from typing import Any, NoReturn

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from viewscript.exceptions import ViewscriptError

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the viewscript CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (VIEWSCRIPT_DEBUG=1): DEBUG level - component loads, cache hits/misses
    """
    debug = bool(os.environ.get("VIEWSCRIPT_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_time=verbose or debug,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("viewscript")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Report a render failure and exit."""
    if isinstance(error, ViewscriptError):
        exit_with_error(str(error))
    exit_with_error(f"Unexpected error: {error}")


def parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """Parse 'a.b=value' pairs into a nested mapping.

    Values are decoded as YAML scalars, so '3' is an int and 'true' a bool.
    """
    result: dict[str, Any] = {}
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {assignment!r}")

        target = result
        *parents, leaf = key.split(".")
        for part in parents:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise typer.BadParameter(f"'{part}' is already set to a scalar in {assignment!r}")
        target[leaf] = yaml.safe_load(raw) if raw else ""

    return result
