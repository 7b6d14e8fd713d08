"""Kill commands - stop dev servers."""

import typer

from ..discovery import discover_servers
from ..process import ProcessControlError, ProcessKiller, find_server
from .common import console, error, get_settings, success


def kill(
    target: int = typer.Argument(..., help="PID of the server (or port with --port)"),
    by_port: bool = typer.Option(False, "-p", "--port", help="Treat TARGET as a port"),
) -> None:
    """Stop a dev server with SIGTERM, then SIGKILL if it does not exit.

    Only processes that devradar lists as dev servers can be stopped.

    Examples:
        devradar kill 4242
        devradar kill --port 3000
    """
    settings = get_settings()
    killer = ProcessKiller(grace=settings.kill_grace)

    try:
        if by_port:
            server = find_server(discover_servers(), port=target)
        else:
            server = find_server(discover_servers(), pid=target)
        stopped = killer.terminate(server.pid)
    except ProcessControlError as e:
        error(str(e))
        raise typer.Exit(1)

    if stopped:
        success(f"Stopped {server.label} on port {server.port} (pid {server.pid})")
    else:
        console.print(f"[yellow]Process {server.pid} had already exited[/yellow]")


def kill_all(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Stop every running dev server.

    Examples:
        devradar kill-all
        devradar kill-all --force
    """
    settings = get_settings()
    servers = discover_servers()

    if not servers:
        console.print("[green]No dev servers running[/green]")
        return

    console.print(f"[yellow]Will stop {len(servers)} server(s):[/yellow]")
    for server in servers:
        console.print(f"  - {server.label} on port {server.port} (pid {server.pid})")

    if not force:
        confirm = typer.confirm("Proceed?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            return

    killer = ProcessKiller(grace=settings.kill_grace)
    result = killer.terminate_all(s.pid for s in servers)

    if result.killed:
        console.print(f"[dim]Force killed: {', '.join(str(pid) for pid in result.killed)}[/dim]")
    success(f"Stopped {len(result.stopped)} server(s)")

    if result.denied:
        error(f"Not permitted to stop: {', '.join(str(pid) for pid in result.denied)}")
        raise typer.Exit(1)
