"""Root Typer application for the Vector CLI."""

from __future__ import annotations

import sys
from typing import Optional

import click
import typer
from rich.console import Console

from vector_cli import __version__
from vector_cli.commands import HELP, auth, build_registry
from vector_cli.errors import RegistryError
from vector_cli.registry import EndpointRegistry
from vector_cli.services import dispatcher
from vector_common.constants import EXIT_GENERAL_ERROR

app = typer.Typer(
    name="vector",
    help="Vector Pro hosting: manage sites, environments and deployments from the terminal.",
    no_args_is_help=True,
    add_completion=False,
)

app.add_typer(auth.app, name="auth", help="Log in, log out and check authentication.")


def _version(value: bool) -> None:
    if value:
        typer.echo(f"vector {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """Global options --json, --no-json, --compact, --token, --api-url and -v work everywhere."""


def build_root(registry: EndpointRegistry) -> click.Group:
    """Root click group with the auth commands and every registry command attached."""
    group = typer.main.get_group(app)
    return dispatcher.attach_registry(group, registry, HELP)


def main() -> None:
    try:
        registry = build_registry()
        root_group = build_root(registry)
    except RegistryError as exc:
        Console(stderr=True).out(f"Error: {exc.message}", highlight=False)
        sys.exit(EXIT_GENERAL_ERROR)
    sys.exit(dispatcher.run(sys.argv[1:], root=root_group, registry=registry))


if __name__ == "__main__":
    main()
