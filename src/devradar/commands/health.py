"""Health command - probe ports directly."""

import typer
from rich.table import Table

from ..console import health_dot, server_url
from .common import console, get_health_checker, get_settings, probe_and_wait


def health(
    ports: list[int] = typer.Argument(..., help="Ports on localhost to probe"),
) -> None:
    """Check whether servers on the given ports answer over HTTPS or HTTP.

    Examples:
        devradar health 3000
        devradar health 3000 5173 8000
    """
    settings = get_settings()
    with get_health_checker(settings) as checker:
        probe_and_wait(checker, ports)

        table = Table(title="Health")
        table.add_column("Port", style="yellow", justify="right")
        table.add_column("Status")
        table.add_column("URL", style="blue")

        for port in sorted(set(ports)):
            status = checker.status(port)
            uses_https = checker.uses_https(port)
            table.add_row(
                str(port),
                f"{health_dot(status.value)} {status.value}",
                server_url(port, uses_https, settings.custom_paths.get(port, "")),
            )

    console.print(table)
