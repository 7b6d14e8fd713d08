"""External process and socket queries for devradar."""

import os
import subprocess
from collections.abc import Iterable

from .console import debug


class SystemScanner:
    """Run the system commands the discovery cycle reads from.

    Every method returns the raw stdout of one query. A missing binary,
    a timeout or a spawn failure yields an empty string: the caller
    treats it as "no data" rather than an error.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        """Initialize scanner.

        Args:
            timeout: Seconds to wait for each command
        """
        self.timeout = timeout

    def listening_sockets(self) -> str:
        """List listening TCP sockets as lsof field output (pid, command, name).

        Returns:
            Tagged lines such as ``p123``, ``cnode``, ``n*:3000``
        """
        return self._run(["lsof", "-iTCP", "-sTCP:LISTEN", "-nP", "-F", "pcn"])

    def command_lines(self, pids: Iterable[int]) -> str:
        """Full command line per pid, one ``pid command`` row each."""
        return self._run_ps(pids, "pid=,command=")

    def working_dirs(self, pids: Iterable[int]) -> str:
        """Current working directory per pid as lsof field output."""
        pid_list = _join_pids(pids)
        if not pid_list:
            return ""
        return self._run(["lsof", "-a", "-p", pid_list, "-d", "cwd", "-Fn"])

    def resource_stats(self, pids: Iterable[int]) -> str:
        """CPU percent and resident size (KB) per pid."""
        return self._run_ps(pids, "pid=,pcpu=,rss=")

    def start_times(self, pids: Iterable[int]) -> str:
        """Human-readable start timestamp per pid."""
        return self._run_ps(pids, "pid=,lstart=")

    def _run_ps(self, pids: Iterable[int], fields: str) -> str:
        pid_list = _join_pids(pids)
        if not pid_list:
            return ""
        return self._run(["ps", "-p", pid_list, "-o", fields])

    def _run(self, args: list[str]) -> str:
        """Run a command and return its stdout.

        A non-zero exit still returns stdout: both lsof and ps exit 1 when
        some of the requested pids have already gone away.

        Args:
            args: Command and arguments

        Returns:
            Command output, or "" if it could not be run
        """
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                # lstart must come out in the C locale to be parseable
                env={**os.environ, "LC_ALL": "C"},
            )
        except (subprocess.SubprocessError, OSError) as e:
            debug(f"{args[0]} failed: {e}")
            return ""

        if result.returncode != 0:
            debug(f"{' '.join(args)} exited with {result.returncode}")
        return result.stdout or ""


def _join_pids(pids: Iterable[int]) -> str:
    return ",".join(str(pid) for pid in sorted(set(pids)))
