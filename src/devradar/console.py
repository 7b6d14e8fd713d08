"""Console output and display formatting for devradar."""

import os
from datetime import datetime
from typing import Any

from rich.console import Console

# Shared console instances
console = Console()
error_console = Console(stderr=True)

# Debug mode - enabled by DEVRADAR_DEBUG environment variable
DEBUG = os.getenv("DEVRADAR_DEBUG", "").lower() in ("1", "true", "yes")

HEALTH_DOTS = {
    "green": "[green]●[/green]",
    "yellow": "[yellow]●[/yellow]",
    "unknown": "[dim]○[/dim]",
}


def debug(message: str, **kwargs: Any) -> None:
    """Print debug message to stderr if DEBUG mode is enabled.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    if DEBUG:
        error_console.print(f"[dim][DEBUG][/dim] {message}", **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print success message in green."""
    console.print(f"[green]{message}[/green]", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print warning message in yellow to stderr.

    Goes to stderr so machine-readable stdout (``--json``) stays clean.
    """
    error_console.print(f"[yellow]{message}[/yellow]", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print error message in red to stderr."""
    error_console.print(f"[red]Error:[/red] {message}", **kwargs)


def format_uptime(start: datetime | None, now: datetime | None = None) -> str:
    """Format how long a process has been running.

    Args:
        start: Process start time
        now: Reference time. Defaults to datetime.now().

    Returns:
        "" if unknown, "< 1m", "12m", "3h" or "3h 12m"
    """
    if start is None:
        return ""
    seconds = int(((now or datetime.now()) - start).total_seconds())
    if seconds < 60:
        return "< 1m"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours}h"
    return f"{hours}h {remaining}m"


def server_url(port: int, uses_https: bool = False, path: str = "") -> str:
    """Build the browser URL for a local server."""
    scheme = "https" if uses_https else "http"
    return f"{scheme}://localhost:{port}{path}"


def health_dot(status: str) -> str:
    """Rich markup for a health status value."""
    return HEALTH_DOTS.get(status, HEALTH_DOTS["unknown"])
