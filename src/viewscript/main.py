"""Viewscript CLI Main Entry Point

Usage:
    viewscript render pages/home                  # Render to stdout
    viewscript render pages/home -o home.html     # Render to file
    viewscript render pages/home -d data.yaml     # Overlay data from a file
    viewscript render pages/home --set user.name=Ann
    viewscript show pages/home                    # List imports and default data
    viewscript --version                          # Show version
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.table import Table

from ._version import __version__
from .config import ViewscriptConfig, load_config_or_default
from .engine import render_component
from .exceptions import ViewscriptError
from .utils import console, exit_with_error, handle_error, parse_assignments, setup_logging

typer_app = typer.Typer(
    help="Render directory-addressed HTML components to static markup.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"viewscript {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Render directory-addressed HTML components to static markup."""


def _load_config(
    config_file: Optional[Path], base_dir: Optional[Path], cache: Optional[bool]
) -> ViewscriptConfig:
    if config_file is not None and not config_file.exists():
        exit_with_error(f"File not found: {config_file}")

    config = load_config_or_default(config_file)
    if base_dir is not None:
        config.base_dir = base_dir.resolve()
    if cache is not None:
        config.cache.enabled = cache
    return config


def _load_data_file(path: Path) -> dict:
    if not path.exists():
        exit_with_error(f"File not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        exit_with_error(f"Cannot parse {path}: {e}")

    if not isinstance(data, dict):
        exit_with_error(f"{path} must contain a mapping")
    return data


@typer_app.command()
def render(
    locator: str = typer.Argument(..., help="Component locator, relative to the base dir."),
    data_file: Optional[Path] = typer.Option(
        None, "-d", "--data", help="YAML or JSON file with data to render with."
    ),
    assignments: Optional[List[str]] = typer.Option(
        None, "-s", "--set", help="Set a data value, e.g. --set user.name=Ann."
    ),
    base_dir: Optional[Path] = typer.Option(
        None, "-b", "--base-dir", help="Directory component locators resolve against."
    ),
    cache: Optional[bool] = typer.Option(
        None, "--cache/--no-cache", help="Cache components while rendering."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write markup to file instead of stdout."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to viewscript.yaml."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Render a component and print the resulting markup."""
    setup_logging(verbose)
    config = _load_config(config_file, base_dir, cache)

    data = dict(config.data)
    if data_file is not None:
        data.update(_load_data_file(data_file))
    data.update(parse_assignments(assignments or []))

    try:
        markup = asyncio.run(
            render_component(locator, data, config.create_render_context())
        )
    except ViewscriptError as e:
        handle_error(e)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markup, encoding="utf-8")
        typer.echo(f"Wrote {locator} to {output}")
    else:
        typer.echo(markup)


@typer_app.command()
def show(
    locator: str = typer.Argument(..., help="Component locator, relative to the base dir."),
    base_dir: Optional[Path] = typer.Option(
        None, "-b", "--base-dir", help="Directory component locators resolve against."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to viewscript.yaml."
    ),
) -> None:
    """Show a component's imports and default data."""
    setup_logging()
    config = _load_config(config_file, base_dir, None)
    context = config.create_render_context()

    try:
        record = asyncio.run(context.provider.get_component(locator, context.options))
    except ViewscriptError as e:
        handle_error(e)

    table = Table(title=f"Imports of {locator}")
    table.add_column("Name", style="cyan")
    table.add_column("Locator")
    for name, target in record.imports.items():
        table.add_row(name, target)
    console.print(table)

    console.print("[bold]Default data[/bold]")
    console.print(yaml.safe_dump(record.data, sort_keys=False).rstrip() or "{}")


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
