"""Typer CLI for devradar - Main entry point."""

import typer

from . import __version__
from .commands import config, health, kill, kill_all, list_cmd, watch

app = typer.Typer(
    name="devradar",
    help="Find and watch local development servers",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"devradar version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find and watch local development servers."""
    pass

# Register all commands
app.command(name="list")(list_cmd)
app.command()(watch)
app.command()(health)
app.command()(kill)
app.command(name="kill-all")(kill_all)
app.command()(config)


def main() -> None:
    """Main entry point."""
    app()
