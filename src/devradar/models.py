"""Data types shared across the discovery pipeline."""

import enum
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ListeningSocket:
    """A process observed listening on a TCP port."""

    pid: int
    port: int
    process_name: str  # Short command name reported by lsof


@dataclass(frozen=True)
class ProcessSnapshot:
    """Metadata resolved for one process in a discovery cycle.

    A field left as None means the corresponding query returned no row
    for this pid. It is unknown, not zero.
    """

    pid: int
    command: str | None = None
    cwd: str | None = None
    cpu_percent: float | None = None
    memory_mb: int | None = None
    start_time: datetime | None = None


@dataclass(frozen=True)
class ServerRecord:
    """A discovered development server."""

    pid: int
    port: int  # Canonical (lowest) listening port
    label: str
    app_name: str | None = None
    project_path: str | None = None
    command: str | None = None
    start_time: datetime | None = None
    cpu_percent: float | None = None
    memory_mb: int | None = None

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "pid": self.pid,
            "port": self.port,
            "label": self.label,
            "app_name": self.app_name,
            "project_path": self.project_path,
            "command": self.command,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "cpu_percent": self.cpu_percent,
            "memory_mb": self.memory_mb,
        }


class HealthStatus(str, enum.Enum):
    """Reachability of a server port."""

    UNKNOWN = "unknown"
    GREEN = "green"
    YELLOW = "yellow"


@dataclass(frozen=True)
class HealthEntry:
    """Result of the latest probe of a port."""

    port: int
    status: HealthStatus
    uses_https: bool
    observed_at: float  # Clock reading when the probe finished
