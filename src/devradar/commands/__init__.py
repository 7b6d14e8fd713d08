"""Command modules for devradar CLI."""

from .config import config
from .health import health
from .kill import kill, kill_all
from .list import list_cmd
from .watch import watch

__all__ = [
    "config",
    "health",
    "kill",
    "kill_all",
    "list_cmd",
    "watch",
]
