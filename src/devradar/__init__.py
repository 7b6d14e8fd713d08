"""devradar - Discover and monitor local development servers."""

__version__ = "0.1.0"

from .classifier import classify
from .config import Settings, load_settings
from .discovery import build_servers, discover_servers, infer_app_name
from .health import HealthChecker
from .models import HealthEntry, HealthStatus, ListeningSocket, ProcessSnapshot, ServerRecord
from .process import ProcessControlError, ProcessKiller
from .resolver import ProcessResolver
from .sockets import parse_listening_sockets
from .system import SystemScanner

__all__ = [
    "__version__",
    "classify",
    "Settings",
    "load_settings",
    "build_servers",
    "discover_servers",
    "infer_app_name",
    "HealthChecker",
    "HealthEntry",
    "HealthStatus",
    "ListeningSocket",
    "ProcessSnapshot",
    "ServerRecord",
    "ProcessControlError",
    "ProcessKiller",
    "ProcessResolver",
    "parse_listening_sockets",
    "SystemScanner",
]
