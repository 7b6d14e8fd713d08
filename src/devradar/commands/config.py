"""Config command - show effective configuration."""

import typer
from rich.table import Table

from ..config import get_config_path
from .common import console, get_settings


def config(
    show: bool = typer.Option(False, "--show", help="Show effective settings"),
    path: bool = typer.Option(False, "--path", help="Print the config file location"),
) -> None:
    """Show devradar configuration.

    Settings are read from config.yaml in the user config directory,
    or from the file named by DEVRADAR_CONFIG.

    Examples:
        devradar config --show
        devradar config --path
    """
    config_path = get_config_path()

    if path:
        print(config_path)
        return

    if show:
        settings = get_settings()
        table = Table(title="Settings")
        table.add_column("Key", style="green")
        table.add_column("Value", style="yellow")

        for key, value in settings.to_dict().items():
            if key == "custom_paths":
                value = ", ".join(f"{p} -> {v}" for p, v in sorted(value.items())) or "-"
            table.add_row(key, str(value))

        console.print(table)
        exists = "" if config_path.exists() else " (not found, using defaults)"
        console.print(f"[dim]Config file: {config_path}{exists}[/dim]")
        return

    console.print("[yellow]Use --show or --path[/yellow]")
