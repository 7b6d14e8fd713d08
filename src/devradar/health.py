"""Background reachability probes for discovered servers."""

import threading
import time
import warnings
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor

import requests
import urllib3

from .console import debug
from .models import HealthEntry, HealthStatus

DEFAULT_TIMEOUT = 1.5
DEFAULT_TTL = 4.0
DEFAULT_MAX_WORKERS = 16

Fetcher = Callable[[str, float], int | None]


def fetch_status(url: str, timeout: float) -> int | None:
    """Request a URL and return its HTTP status code.

    Args:
        url: URL to request
        timeout: Connect and read timeout in seconds

    Returns:
        Status code, or None if nothing answered
    """
    try:
        with requests.get(
            url, timeout=timeout, verify=False, allow_redirects=False, stream=True
        ) as response:
            return response.status_code
    except requests.RequestException as e:
        debug(f"{url}: {type(e).__name__}")
        return None


class HealthChecker:
    """Probe ports over HTTPS/HTTP and cache the latest result per port.

    ``probe`` schedules one background check per port and returns at once.
    ``status`` and ``uses_https`` only read the cache; an entry older than
    ``ttl`` seconds reads as unknown even while a newer probe is running.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        ttl: float = DEFAULT_TTL,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], float] = time.monotonic,
        fetch: Fetcher = fetch_status,
    ) -> None:
        """Initialize health checker.

        Args:
            timeout: Per-request timeout in seconds
            ttl: Seconds a probe result stays valid
            max_workers: Maximum number of concurrent probes
            clock: Monotonic time source
            fetch: Function returning the status code for a URL, or None
        """
        self.timeout = timeout
        self.ttl = ttl
        self._clock = clock
        self._fetch = fetch
        self._entries: dict[int, HealthEntry] = {}
        self._lock = threading.Lock()
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="devradar-probe"
        )
        ignore_localhost_cert_warnings()

    def probe(self, ports: Iterable[int]) -> list[Future]:
        """Schedule a probe for each port without waiting for any of them.

        Args:
            ports: Ports to probe

        Returns:
            One future per scheduled probe, for callers that want to wait
        """
        return [self._pool.submit(self.check_port, port) for port in set(ports)]

    def check_port(self, port: int) -> HealthEntry:
        """Probe one port now and replace its cache entry.

        HTTPS is tried first. Any answer below 500 is green; a 5xx answer
        is yellow. If HTTPS gets no answer at all, plain HTTP is tried.

        Args:
            port: Port on localhost

        Returns:
            The entry that was stored
        """
        uses_https = False
        status = HealthStatus.UNKNOWN

        code = self._fetch(f"https://localhost:{port}", self.timeout)
        if code is not None:
            # Any HTTPS answer, 5xx included, means the port speaks TLS; an
            # HTTP retry would fail the handshake or report the wrong scheme.
            # A 5xx is still yellow rather than green.
            uses_https = True
            status = _status_for(code)
        else:
            code = self._fetch(f"http://localhost:{port}", self.timeout)
            if code is not None:
                status = _status_for(code)

        entry = HealthEntry(
            port=port, status=status, uses_https=uses_https, observed_at=self._clock()
        )
        with self._lock:
            self._entries[port] = entry

        debug(f"Port {port}: {status.value}{' (https)' if uses_https else ''}")
        return entry

    def entry(self, port: int) -> HealthEntry | None:
        """Get the cached entry for a port if it is still fresh."""
        with self._lock:
            entry = self._entries.get(port)
        if entry is None or self._clock() - entry.observed_at >= self.ttl:
            return None
        return entry

    def status(self, port: int) -> HealthStatus:
        """Get the last known status of a port, or UNKNOWN if stale."""
        entry = self.entry(port)
        return entry.status if entry else HealthStatus.UNKNOWN

    def uses_https(self, port: int) -> bool:
        """Whether the last fresh probe reached the port over HTTPS."""
        entry = self.entry(port)
        return entry.uses_https if entry else False

    def close(self, wait: bool = False) -> None:
        """Stop accepting probes. In-flight probes are not cancelled."""
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "HealthChecker":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def ignore_localhost_cert_warnings() -> None:
    """Silence urllib3's unverified-request warning for localhost only.

    Local dev servers use self-signed certificates. Requests to any other
    host still warn. Adding the same filter again replaces the old entry.
    """
    warnings.filterwarnings(
        "ignore",
        message=r"Unverified HTTPS request is being made to host .localhost.",
        category=urllib3.exceptions.InsecureRequestWarning,
    )


def _status_for(code: int) -> HealthStatus:
    return HealthStatus.YELLOW if code >= 500 else HealthStatus.GREEN
