"""Dev server discovery: sockets, process metadata and classification combined."""

import os
from collections.abc import Callable
from pathlib import Path

from .classifier import classify
from .console import debug
from .models import ListeningSocket, ProcessSnapshot, ServerRecord
from .resolver import ProcessResolver
from .sockets import dedupe_sockets, parse_listening_sockets
from .system import SystemScanner

# Directory names that say nothing about the project
GENERIC_DIR_NAMES = frozenset(
    {"users", "usr", "opt", "bin", "lib", "tmp", "var", "node_modules", "."}
)

Classifier = Callable[[str, str, int], str | None]


def discover_servers(
    scanner: SystemScanner | None = None,
    home: str | None = None,
) -> list[ServerRecord]:
    """Run one discovery cycle.

    Lists listening TCP sockets, resolves metadata for their processes in
    one batch and keeps the ones that classify as dev servers.

    Args:
        scanner: Source of raw command output. Defaults to a new SystemScanner.
        home: Home directory, never used as an app name. Defaults to the user's.

    Returns:
        Server records sorted by port, at most one per process
    """
    scanner = scanner or SystemScanner()

    sockets = dedupe_sockets(parse_listening_sockets(scanner.listening_sockets()))
    if not sockets:
        debug("No listening sockets found")
        return []

    snapshots = ProcessResolver(scanner).resolve(sock.pid for sock in sockets)
    servers = build_servers(sockets, snapshots, home=home)
    debug(f"{len(sockets)} sockets -> {len(servers)} dev servers")
    return servers


def build_servers(
    sockets: list[ListeningSocket],
    snapshots: dict[int, ProcessSnapshot],
    classifier: Classifier = classify,
    home: str | None = None,
) -> list[ServerRecord]:
    """Fold sockets and process snapshots into server records.

    A process listening on several ports is reported once, at its lowest
    port, and only if that socket classifies. Sockets on its other ports
    are dropped even if they would classify.

    Args:
        sockets: Listening sockets in discovery order
        snapshots: Process metadata by pid
        classifier: Labelling function (command, process name, port)
        home: Home directory excluded from app name inference

    Returns:
        Server records sorted by port; equal ports keep discovery order
    """
    sockets = dedupe_sockets(sockets)

    lowest_port: dict[int, int] = {}
    for sock in sockets:
        current = lowest_port.get(sock.pid)
        if current is None or sock.port < current:
            lowest_port[sock.pid] = sock.port

    servers: list[ServerRecord] = []
    for sock in sockets:
        if sock.port != lowest_port[sock.pid]:
            continue

        snapshot = snapshots.get(sock.pid) or ProcessSnapshot(pid=sock.pid)
        command = snapshot.command or sock.process_name

        label = classifier(command, sock.process_name, sock.port)
        if label is None:
            continue

        project_path = normalize_project_path(snapshot.cwd)
        servers.append(
            ServerRecord(
                pid=sock.pid,
                port=sock.port,
                label=label,
                app_name=infer_app_name(project_path, command, home=home),
                project_path=project_path,
                command=snapshot.command,
                start_time=snapshot.start_time,
                cpu_percent=snapshot.cpu_percent,
                memory_mb=snapshot.memory_mb,
            )
        )

    # sorted() is stable
    return sorted(servers, key=lambda s: s.port)


def normalize_project_path(path: str | None) -> str | None:
    """Normalize a working directory; the filesystem root counts as none."""
    if not path:
        return None
    normalized = os.path.normpath(path)
    if normalized == "/":
        return None
    return normalized


def infer_app_name(cwd: str | None, command: str, home: str | None = None) -> str | None:
    """Guess a project name for a server.

    Tries, in order:
    1. The last component of the working directory, unless it is the
       home directory or a generic name like ``usr`` or ``tmp``
    2. The parent directory name of the first absolute path in the command

    Args:
        cwd: Working directory of the process
        command: Full command line
        home: Home directory. Defaults to the current user's.

    Returns:
        App name, or None if nothing useful was found

    Examples:
        /Users/alice/projects/acme-api -> acme-api
        node /Users/alice/site/server.js (cwd "/") -> site
    """
    home_dir = os.path.normpath(home or str(Path.home()))

    normalized = normalize_project_path(cwd)
    if normalized and normalized != home_dir:
        candidate = os.path.basename(normalized)
        if _is_project_name(candidate):
            return candidate

    for raw_token in command.split():
        token = raw_token.strip("\"'")
        if not token.startswith("/"):
            continue
        parent = os.path.basename(os.path.dirname(os.path.normpath(token)))
        if _is_project_name(parent):
            return parent

    return None


def _is_project_name(value: str) -> bool:
    return bool(value) and value.lower() not in GENERIC_DIR_NAMES
