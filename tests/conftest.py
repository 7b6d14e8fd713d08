"""Test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from devradar.system import SystemScanner


class FakeScanner(SystemScanner):
    """Scanner returning canned command output instead of running commands."""

    def __init__(
        self,
        sockets: str = "",
        commands: str = "",
        cwds: str = "",
        stats: str = "",
        starts: str = "",
    ) -> None:
        super().__init__()
        self.outputs = {
            "sockets": sockets,
            "commands": commands,
            "cwds": cwds,
            "stats": stats,
            "starts": starts,
        }
        self.calls: list[tuple[str, frozenset[int]]] = []

    def listening_sockets(self) -> str:
        self.calls.append(("sockets", frozenset()))
        return self.outputs["sockets"]

    def command_lines(self, pids):
        self.calls.append(("commands", frozenset(pids)))
        return self.outputs["commands"]

    def working_dirs(self, pids):
        self.calls.append(("cwds", frozenset(pids)))
        return self.outputs["cwds"]

    def resource_stats(self, pids):
        self.calls.append(("stats", frozenset(pids)))
        return self.outputs["stats"]

    def start_times(self, pids):
        self.calls.append(("starts", frozenset(pids)))
        return self.outputs["starts"]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    """Fake clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def next_scanner(make_scanner):
    """Scanner output for a Next.js server on 3000/3001 plus an unrelated listener."""
    return make_scanner(
        sockets="p111\ncnext-server\nf22\nn*:3000\nf23\nn*:3001\np222\ncpostgres\nn127.0.0.1:5432\n",
        commands="  111 next-server (v14.2.3)\n  222 /usr/lib/postgresql/16/bin/postgres -D /var/lib/pg\n",
        cwds="p111\nfcwd\nn/Users/alice/site\np222\nfcwd\nn/var/lib/pg\n",
        stats="  111   2.5  204800\n  222   0.0  51200\n",
        starts="  111 Sat Oct  3 09:05:11 2026\n  222 Thu Oct  1 08:00:00 2026\n",
    )


@pytest.fixture
def make_scanner():
    """Factory for scanners with canned output."""
    return FakeScanner
