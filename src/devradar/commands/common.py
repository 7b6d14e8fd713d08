"""Common utilities for CLI commands."""

from concurrent.futures import wait

from rich.table import Table

from ..config import Settings, load_settings
from ..console import (
    console,
    debug,
    error,
    error_console,
    format_uptime,
    health_dot,
    server_url,
    success,
    warning,
)
from ..health import HealthChecker
from ..models import ServerRecord

# Re-export console utilities
__all__ = [
    "console",
    "error_console",
    "debug",
    "success",
    "warning",
    "error",
    "get_settings",
    "get_health_checker",
    "probe_and_wait",
    "build_server_table",
]


def get_settings() -> Settings:
    """Get effective settings."""
    return load_settings()


def get_health_checker(settings: Settings) -> HealthChecker:
    """Get a health checker configured from settings."""
    return HealthChecker(
        timeout=settings.probe_timeout,
        ttl=settings.health_ttl,
        max_workers=settings.max_probe_workers,
    )


def probe_and_wait(checker: HealthChecker, ports: list[int]) -> None:
    """Probe ports and block until the probes finish or time out.

    Each probe makes at most two requests, so two timeouts bound it.
    """
    futures = checker.probe(ports)
    if futures:
        wait(futures, timeout=checker.timeout * 2 + 1)


def build_server_table(
    servers: list[ServerRecord],
    checker: HealthChecker | None = None,
    settings: Settings | None = None,
    title: str = "Dev Servers",
) -> Table:
    """Render servers as a rich table.

    Args:
        servers: Servers to show
        checker: If given, adds health and URL columns read from its cache
        settings: Source of per-port URL paths
        title: Table title

    Returns:
        Table ready for console.print
    """
    custom_paths = settings.custom_paths if settings else {}

    table = Table(title=title)
    if checker:
        table.add_column("", no_wrap=True)
    table.add_column("Port", style="yellow", justify="right")
    table.add_column("Server", style="green")
    table.add_column("App", style="cyan")
    table.add_column("PID", style="dim", justify="right")
    table.add_column("Uptime", justify="right")
    table.add_column("CPU", justify="right")
    table.add_column("Mem", justify="right")
    if checker:
        table.add_column("URL", style="blue")
    table.add_column("Path", style="dim")

    for server in servers:
        row = []
        if checker:
            row.append(health_dot(checker.status(server.port).value))
        row.extend(
            [
                str(server.port),
                server.label,
                server.app_name or "-",
                str(server.pid),
                format_uptime(server.start_time) or "-",
                f"{server.cpu_percent:.1f}%" if server.cpu_percent is not None else "-",
                f"{server.memory_mb} MB" if server.memory_mb is not None else "-",
            ]
        )
        if checker:
            row.append(
                server_url(
                    server.port,
                    checker.uses_https(server.port),
                    custom_paths.get(server.port, ""),
                )
            )
        row.append(server.project_path or "-")
        table.add_row(*row)

    return table
