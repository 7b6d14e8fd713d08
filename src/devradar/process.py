"""Stopping discovered dev servers."""

import os
import signal
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .console import debug
from .models import ServerRecord

DEFAULT_GRACE = 3.0


class ProcessControlError(Exception):
    """Raised when a server cannot be found or signalled."""

    pass


@dataclass
class TerminateResult:
    """Result of stopping several processes."""

    stopped: list[int]  # Sent SIGTERM
    killed: list[int]  # Also needed SIGKILL
    denied: list[int]  # Not permitted to signal


class ProcessKiller:
    """Terminate processes with SIGTERM, escalating to SIGKILL."""

    def __init__(
        self,
        grace: float = DEFAULT_GRACE,
        send_signal: Callable[[int, int], None] = os.kill,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize killer.

        Args:
            grace: Seconds to wait after SIGTERM before SIGKILL
            send_signal: Signal function, ``os.kill`` by default
            sleep: Sleep function, ``time.sleep`` by default
        """
        self.grace = grace
        self._send_signal = send_signal
        self._sleep = sleep

    def terminate(self, pid: int) -> bool:
        """Stop a single process.

        Args:
            pid: Process id

        Returns:
            True if the process was signalled, False if it was already gone

        Raises:
            ProcessControlError: If we are not allowed to signal it
        """
        if not self._signal(pid, signal.SIGTERM):
            return False
        self._sleep(self.grace)
        if self.is_alive(pid):
            debug(f"{pid} ignored SIGTERM, sending SIGKILL")
            self._signal(pid, signal.SIGKILL)
        return True

    def terminate_all(self, pids: Iterable[int]) -> TerminateResult:
        """Stop several processes, waiting for the grace period only once.

        A process we may not signal is recorded in ``denied`` and the rest
        are still stopped.

        Args:
            pids: Process ids

        Returns:
            TerminateResult with details of the operation
        """
        result = TerminateResult(stopped=[], killed=[], denied=[])

        for pid in dict.fromkeys(pids):
            try:
                if self._signal(pid, signal.SIGTERM):
                    result.stopped.append(pid)
            except ProcessControlError:
                result.denied.append(pid)

        if not result.stopped:
            return result

        self._sleep(self.grace)

        for pid in result.stopped:
            if not self.is_alive(pid):
                continue
            try:
                if self._signal(pid, signal.SIGKILL):
                    result.killed.append(pid)
            except ProcessControlError:
                result.denied.append(pid)
        return result

    def is_alive(self, pid: int) -> bool:
        """Check whether a process still exists (signal 0)."""
        try:
            self._send_signal(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # Exists, but owned by someone else
            return True
        return True

    def _signal(self, pid: int, sig: int) -> bool:
        try:
            self._send_signal(pid, sig)
        except ProcessLookupError:
            return False
        except PermissionError as e:
            raise ProcessControlError(f"Not permitted to signal process {pid}") from e
        return True


def find_server(
    servers: list[ServerRecord], pid: int | None = None, port: int | None = None
) -> ServerRecord:
    """Find a discovered server by pid or canonical port.

    Raises:
        ProcessControlError: If no discovered server matches
    """
    for server in servers:
        if pid is not None and server.pid == pid:
            return server
        if port is not None and server.port == port:
            return server
    target = f"port {port}" if port is not None else f"pid {pid}"
    raise ProcessControlError(f"No dev server found for {target}")
