"""Batch process metadata lookup for discovered sockets."""

import math
import re
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from .console import debug
from .models import ProcessSnapshot
from .system import SystemScanner

# ps lstart in the C locale, e.g. "Sat Oct 17 09:05:11 2026"
LSTART_FORMAT = "%a %b %d %H:%M:%S %Y"


class ProcessResolver:
    """Resolve command line, cwd, resource usage and start time for pids."""

    def __init__(self, scanner: SystemScanner | None = None) -> None:
        """Initialize resolver.

        Args:
            scanner: Source of raw command output. Defaults to a new SystemScanner.
        """
        self.scanner = scanner or SystemScanner()

    def resolve(self, pids: Iterable[int]) -> dict[int, ProcessSnapshot]:
        """Look up metadata for every pid with one query per field.

        The four queries are independent and run in parallel; all of them
        finish before this returns. A pid that exited between queries
        simply has the later fields missing.

        Args:
            pids: Process ids to resolve

        Returns:
            Snapshot per requested pid. Fields with no matching row are None.
        """
        wanted = set(pids)
        if not wanted:
            return {}

        with ThreadPoolExecutor(max_workers=4) as pool:
            commands = pool.submit(self.scanner.command_lines, wanted)
            cwds = pool.submit(self.scanner.working_dirs, wanted)
            stats = pool.submit(self.scanner.resource_stats, wanted)
            starts = pool.submit(self.scanner.start_times, wanted)

            command_by_pid = parse_command_rows(commands.result())
            cwd_by_pid = parse_cwd_rows(cwds.result())
            stats_by_pid = parse_stats_rows(stats.result())
            start_by_pid = parse_start_rows(starts.result())

        snapshots: dict[int, ProcessSnapshot] = {}
        for pid in wanted:
            cpu, memory_mb = stats_by_pid.get(pid, (None, None))
            snapshots[pid] = ProcessSnapshot(
                pid=pid,
                command=command_by_pid.get(pid),
                cwd=cwd_by_pid.get(pid),
                cpu_percent=cpu,
                memory_mb=memory_mb,
                start_time=start_by_pid.get(pid),
            )

        debug(
            f"Resolved {len(wanted)} pids: {len(command_by_pid)} commands, "
            f"{len(cwd_by_pid)} cwds, {len(stats_by_pid)} stats, {len(start_by_pid)} start times"
        )
        return snapshots


def parse_command_rows(output: str) -> dict[int, str]:
    """Parse ``ps -o pid=,command=`` rows.

    Args:
        output: Raw ps output

    Returns:
        Command line by pid
    """
    result: dict[int, str] = {}
    for line in output.splitlines():
        parts = line.strip().split(maxsplit=1)
        if len(parts) != 2:
            continue
        pid = _to_int(parts[0])
        if pid is not None:
            result[pid] = parts[1].strip()
    return result


def parse_cwd_rows(output: str) -> dict[int, str]:
    """Parse ``lsof -d cwd -Fn`` output into working directory by pid.

    Args:
        output: Raw lsof output (``p<pid>`` / ``f<fd>`` / ``n<path>`` lines)

    Returns:
        Working directory by pid
    """
    result: dict[int, str] = {}
    current_pid: int | None = None
    for line in output.splitlines():
        if not line:
            continue
        tag, value = line[0], line[1:]
        if tag == "p":
            current_pid = _to_int(value)
        elif tag == "n" and current_pid is not None and value:
            result[current_pid] = value
    return result


def parse_stats_rows(output: str) -> dict[int, tuple[float, int]]:
    """Parse ``ps -o pid=,pcpu=,rss=`` rows.

    Args:
        output: Raw ps output

    Returns:
        (cpu percent, resident memory in MB) by pid
    """
    result: dict[int, tuple[float, int]] = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 3:
            continue
        pid = _to_int(parts[0])
        rss_kb = _to_int(parts[2])
        try:
            cpu = float(parts[1])
        except ValueError:
            continue
        if pid is None or rss_kb is None or not math.isfinite(cpu):
            continue
        result[pid] = (cpu, rss_kb // 1024)
    return result


def parse_start_rows(output: str) -> dict[int, datetime]:
    """Parse ``ps -o pid=,lstart=`` rows.

    ps pads single-digit days with an extra space, so runs of spaces are
    collapsed before parsing. Dates that still fail to parse are skipped.

    Args:
        output: Raw ps output

    Returns:
        Start time by pid
    """
    result: dict[int, datetime] = {}
    for line in output.splitlines():
        parts = line.strip().split(maxsplit=1)
        if len(parts) != 2:
            continue
        pid = _to_int(parts[0])
        if pid is None:
            continue
        stamp = parse_lstart(parts[1])
        if stamp is not None:
            result[pid] = stamp
    return result


def parse_lstart(value: str) -> datetime | None:
    """Parse a ps lstart timestamp, returning None if it is not one."""
    collapsed = re.sub(r" {2,}", " ", value.strip())
    try:
        return datetime.strptime(collapsed, LSTART_FORMAT)
    except ValueError:
        return None


def _to_int(value: str) -> int | None:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)
