"""Watch command - live view of dev servers."""

import time

import typer
from rich.live import Live

from ..discovery import discover_servers
from .common import (
    build_server_table,
    console,
    debug,
    get_health_checker,
    get_settings,
    probe_and_wait,
)


def watch(
    interval: float | None = typer.Option(
        None, "-i", "--interval", help="Seconds between refreshes (default from config)"
    ),
) -> None:
    """Continuously show dev servers and their health.

    The list refreshes every interval. Health is probed in the background
    after each refresh and filled in once the probes answer.

    Examples:
        devradar watch
        devradar watch --interval 2
    """
    settings = get_settings()
    interval = interval if interval and interval > 0 else settings.refresh_interval
    debug(f"Refreshing every {interval}s")

    checker = get_health_checker(settings)
    try:
        with Live(console=console, auto_refresh=False) as live:
            while True:
                started = time.monotonic()
                servers = discover_servers()
                title = f"Dev Servers ({len(servers)})"

                # Publish the list first, then again once the probes are in
                live.update(build_server_table(servers, checker, settings, title), refresh=True)
                probe_and_wait(checker, [s.port for s in servers])
                live.update(build_server_table(servers, checker, settings, title), refresh=True)

                time.sleep(max(0.0, interval - (time.monotonic() - started)))
    except KeyboardInterrupt:
        pass
    finally:
        checker.close()
