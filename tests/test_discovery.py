"""Tests for discovery module."""

from datetime import datetime

from devradar.discovery import (
    build_servers,
    discover_servers,
    infer_app_name,
    normalize_project_path,
)
from devradar.models import ListeningSocket, ProcessSnapshot, ServerRecord

HOME = "/Users/alice"


def _always(label):
    return lambda command, name, port: label


def test_discover_servers_end_to_end(next_scanner):
    """Test a Next.js server on two ports is reported once at its lowest port."""
    servers = discover_servers(next_scanner, home=HOME)

    assert servers == [
        ServerRecord(
            pid=111,
            port=3000,
            label="Next.js",
            app_name="site",
            project_path="/Users/alice/site",
            command="next-server (v14.2.3)",
            start_time=datetime(2026, 10, 3, 9, 5, 11),
            cpu_percent=2.5,
            memory_mb=200,
        )
    ]


def test_discover_servers_resolves_all_pids_in_one_batch(next_scanner):
    """Test that metadata queries receive every listening pid at once."""
    discover_servers(next_scanner, home=HOME)

    batched = [pids for name, pids in next_scanner.calls if name != "sockets"]
    assert len(batched) == 4
    assert all(pids == frozenset({111, 222}) for pids in batched)


def test_discover_servers_no_sockets(make_scanner):
    """Test that no metadata queries run when nothing is listening."""
    scanner = make_scanner()

    assert discover_servers(scanner) == []
    assert [name for name, _ in scanner.calls] == ["sockets"]


def test_discover_servers_tolerates_failed_queries(make_scanner):
    """Test that missing metadata degrades fields to unknown."""
    scanner = make_scanner(sockets="p7\ncnode\nn*:5173\n")

    servers = discover_servers(scanner, home=HOME)

    # Falls back to the lsof process name for classification
    assert servers == [ServerRecord(pid=7, port=5173, label="Node")]


def test_canonical_port_is_lowest():
    """Test that a process on several ports is reported once at the lowest."""
    sockets = [
        ListeningSocket(pid=1, port=8081, process_name="node"),
        ListeningSocket(pid=1, port=3000, process_name="node"),
        ListeningSocket(pid=1, port=5000, process_name="node"),
    ]

    servers = build_servers(sockets, {}, classifier=_always("Vite"), home=HOME)

    assert [(s.pid, s.port) for s in servers] == [(1, 3000)]


def test_dual_stack_binding_reported_once():
    """Test that the same (pid, port) seen twice yields one server."""
    sockets = [
        ListeningSocket(pid=1, port=3000, process_name="node"),
        ListeningSocket(pid=1, port=3000, process_name="node"),
    ]

    servers = build_servers(sockets, {}, classifier=_always("Node"), home=HOME)

    assert len(servers) == 1


def test_non_canonical_port_match_is_discarded():
    """Test that only the lowest port's classification counts."""
    sockets = [
        ListeningSocket(pid=1, port=9999, process_name="node"),
        ListeningSocket(pid=1, port=3000, process_name="node"),
    ]

    def classifier(command, name, port):
        return "Node" if port == 9999 else None

    assert build_servers(sockets, {}, classifier=classifier, home=HOME) == []


def test_node_on_unlisted_port_is_excluded():
    """Test that a plain runtime on a non-dev port is not a server."""
    sockets = [ListeningSocket(pid=5, port=9999, process_name="node")]
    snapshots = {5: ProcessSnapshot(pid=5, command="node server.js")}

    assert build_servers(sockets, snapshots, home=HOME) == []


def test_sorted_by_port_stable():
    """Test ordering by port, keeping discovery order for equal ports."""
    sockets = [
        ListeningSocket(pid=3, port=8000, process_name="python"),
        ListeningSocket(pid=1, port=3000, process_name="node"),
        ListeningSocket(pid=2, port=3000, process_name="node"),
    ]

    servers = build_servers(sockets, {}, classifier=_always("X"), home=HOME)

    assert [(s.port, s.pid) for s in servers] == [(3000, 1), (3000, 2), (8000, 3)]


def test_record_command_is_resolved_command_only():
    """Test that the record keeps the resolved command, not the lsof name fallback."""
    sockets = [ListeningSocket(pid=1, port=3000, process_name="node")]

    servers = build_servers(sockets, {}, home=HOME)

    assert servers[0].label == "Node"
    assert servers[0].command is None


def test_infer_app_name_from_cwd():
    """Test app name from the working directory."""
    assert infer_app_name("/Users/alice/projects/acme-api", "node server.js", home=HOME) == "acme-api"
    assert infer_app_name("/Users/alice/projects/acme-api/", "node server.js", home=HOME) == "acme-api"


def test_infer_app_name_home_directory():
    """Test that the home directory is not an app name."""
    assert infer_app_name(HOME, "node server.js", home=HOME) is None
    assert infer_app_name(HOME + "/", "node server.js", home=HOME) is None


def test_infer_app_name_generic_directory():
    """Test that generic directory names are skipped."""
    assert infer_app_name("/tmp", "python -m http.server", home=HOME) is None
    assert infer_app_name("/opt", "java -jar app.jar", home=HOME) is None
    assert infer_app_name("/work/node_modules", "node x.js", home=HOME) is None


def test_infer_app_name_from_command_path():
    """Test fallback to the parent directory of an absolute path in the command."""
    command = '/usr/local/bin/node "/Users/alice/blog/server.js"'

    # /usr/local/bin/node -> "bin" is generic, so the next path is used
    assert infer_app_name("/", command, home=HOME) == "blog"
    assert infer_app_name(None, command, home=HOME) == "blog"


def test_infer_app_name_nothing_found():
    """Test that no name is inferred from relative paths only."""
    assert infer_app_name(None, "node server.js", home=HOME) is None
    assert infer_app_name(None, "", home=HOME) is None


def test_normalize_project_path():
    """Test working directory normalization."""
    assert normalize_project_path("/Users/alice/site/") == "/Users/alice/site"
    assert normalize_project_path("/Users/alice/site/../api") == "/Users/alice/api"
    assert normalize_project_path("/") is None
    assert normalize_project_path("") is None
    assert normalize_project_path(None) is None
