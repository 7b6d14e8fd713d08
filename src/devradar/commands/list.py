"""List command - show running dev servers."""

import json

import typer

from ..discovery import discover_servers
from .common import (
    build_server_table,
    console,
    get_health_checker,
    get_settings,
    probe_and_wait,
)


def list_cmd(
    health: bool = typer.Option(False, "--health", help="Probe each server and show its status"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List dev servers listening on this machine.

    Examples:
        devradar list
        devradar list --health
        devradar list --json
    """
    settings = get_settings()
    servers = discover_servers()

    checker = None
    if health and servers:
        checker = get_health_checker(settings)
        probe_and_wait(checker, [s.port for s in servers])

    try:
        if json_output:
            records = []
            for server in servers:
                record = server.to_dict()
                if checker:
                    record["health"] = checker.status(server.port).value
                    record["https"] = checker.uses_https(server.port)
                records.append(record)
            print(json.dumps(records, indent=2))
            return

        if not servers:
            console.print("[yellow]No dev servers running[/yellow]")
            return

        console.print(build_server_table(servers, checker, settings))
    finally:
        if checker:
            checker.close()
