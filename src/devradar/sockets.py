"""Parse lsof field output into listening sockets."""

from dataclasses import dataclass

from .models import ListeningSocket

PID_TAG = "p"
COMMAND_TAG = "c"
NAME_TAG = "n"


@dataclass
class _PendingProcess:
    """Process set by the last pid line, waiting for its address lines."""

    pid: int
    name: str | None = None


def parse_listening_sockets(output: str) -> list[ListeningSocket]:
    """Parse ``lsof -F pcn`` output.

    Each line is a one-character tag followed by a value:

    - ``p<pid>``    starts a new process and forgets the previous command name
    - ``c<name>``   sets the command name of the current process
    - ``n<addr>``   a listening address; the text after the last colon is the port

    One socket is emitted per address line that follows a valid pid line
    and a command name. Unknown tags and unparseable values are skipped.

    Args:
        output: Raw lsof output

    Returns:
        Sockets in the order they appear in the output
    """
    sockets: list[ListeningSocket] = []
    current: _PendingProcess | None = None

    for line in output.splitlines():
        if not line:
            continue

        tag, value = line[0], line[1:]

        if tag == PID_TAG:
            # An unparseable pid leaves no current process, so the
            # address lines that follow it are dropped
            pid = _parse_int(value)
            current = _PendingProcess(pid=pid) if pid is not None else None
        elif tag == COMMAND_TAG:
            if current is not None:
                current.name = value
        elif tag == NAME_TAG:
            if current is None or current.name is None:
                continue
            port = _parse_port(value)
            if port is not None:
                sockets.append(
                    ListeningSocket(pid=current.pid, port=port, process_name=current.name)
                )

    return sockets


def dedupe_sockets(sockets: list[ListeningSocket]) -> list[ListeningSocket]:
    """Drop repeated (pid, port) pairs, keeping first occurrence order.

    A server bound to both IPv4 and IPv6 shows up twice for the same port.
    """
    seen: set[tuple[int, int]] = set()
    unique: list[ListeningSocket] = []
    for sock in sockets:
        key = (sock.pid, sock.port)
        if key not in seen:
            seen.add(key)
            unique.append(sock)
    return unique


def _parse_port(address: str) -> int | None:
    if ":" not in address:
        return None
    return _parse_int(address.rsplit(":", 1)[1])


def _parse_int(value: str) -> int | None:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)
