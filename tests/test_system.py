"""Tests for system module."""

import subprocess

from devradar import system as system_module
from devradar.system import SystemScanner


class FakeRun:
    """Records subprocess.run calls and returns a canned result."""

    def __init__(self, stdout="", returncode=0, exc=None):
        self.stdout = stdout
        self.returncode = returncode
        self.exc = exc
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        if self.exc:
            raise self.exc
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, "")


def test_listening_sockets_command(monkeypatch):
    """Test the lsof invocation for listening sockets."""
    fake = FakeRun(stdout="p1\ncnode\nn*:3000\n")
    monkeypatch.setattr(system_module.subprocess, "run", fake)

    output = SystemScanner().listening_sockets()

    assert output == "p1\ncnode\nn*:3000\n"
    assert fake.calls == [["lsof", "-iTCP", "-sTCP:LISTEN", "-nP", "-F", "pcn"]]


def test_batched_pid_queries(monkeypatch):
    """Test that pid queries pass one comma-separated, sorted pid list."""
    fake = FakeRun()
    monkeypatch.setattr(system_module.subprocess, "run", fake)
    scanner = SystemScanner()

    scanner.command_lines([30, 10, 20, 10])
    scanner.working_dirs([30, 10])
    scanner.resource_stats([10])
    scanner.start_times([10])

    assert fake.calls == [
        ["ps", "-p", "10,20,30", "-o", "pid=,command="],
        ["lsof", "-a", "-p", "10,30", "-d", "cwd", "-Fn"],
        ["ps", "-p", "10", "-o", "pid=,pcpu=,rss="],
        ["ps", "-p", "10", "-o", "pid=,lstart="],
    ]


def test_empty_pid_set_runs_nothing(monkeypatch):
    """Test that no command runs for an empty pid set."""
    fake = FakeRun()
    monkeypatch.setattr(system_module.subprocess, "run", fake)

    assert SystemScanner().command_lines([]) == ""
    assert SystemScanner().working_dirs([]) == ""
    assert fake.calls == []


def test_missing_binary_gives_empty_output(monkeypatch):
    """Test that a missing command is treated as no data."""
    monkeypatch.setattr(
        system_module.subprocess, "run", FakeRun(exc=FileNotFoundError("lsof"))
    )

    assert SystemScanner().listening_sockets() == ""


def test_timeout_gives_empty_output(monkeypatch):
    """Test that a hung command is treated as no data."""
    monkeypatch.setattr(
        system_module.subprocess,
        "run",
        FakeRun(exc=subprocess.TimeoutExpired(["ps"], 5)),
    )

    assert SystemScanner().start_times([1]) == ""


def test_nonzero_exit_keeps_output(monkeypatch):
    """Test that partial output survives a non-zero exit (some pids gone)."""
    monkeypatch.setattr(
        system_module.subprocess, "run", FakeRun(stdout="  1 vite\n", returncode=1)
    )

    assert SystemScanner().command_lines([1, 2]) == "  1 vite\n"
