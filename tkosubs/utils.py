"""Utility functions for tko-subs."""

import logging
import threading
import time
from typing import Callable, Iterator, List, Optional

from rich.console import Console

console = Console(highlight=False, soft_wrap=True)
logger = logging.getLogger(__name__)


class ScanTimeout(Exception):
    """Raised when a domain's scan deadline expires or the scan is cancelled."""


class ScanContext:
    """
    Deadline and cancellation signal shared by the stages scanning one domain.

    Stages derive their own timeouts from remaining() and register closers for
    any resource holding a live connection; cancel() runs those closers so an
    abandoned scan tears its connections down instead of leaking them.
    """

    def __init__(self, timeout: float):
        self.deadline = time.monotonic() + timeout
        self._cancelled = threading.Event()
        self._closers: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return self.cancelled or self.remaining() <= 0

    def check(self) -> None:
        """Raise ScanTimeout if the scan should stop now."""
        if self.expired():
            raise ScanTimeout("scan deadline exceeded")

    def on_cancel(self, closer: Callable[[], None]) -> None:
        """Register a callable run on cancellation (or at once if already cancelled)."""
        with self._lock:
            if not self.cancelled:
                self._closers.append(closer)
                return
        self._run_closer(closer)

    def cancel(self) -> None:
        with self._lock:
            self._cancelled.set()
            closers, self._closers = self._closers, []
        for closer in closers:
            self._run_closer(closer)

    @staticmethod
    def _run_closer(closer: Callable[[], None]) -> None:
        try:
            closer()
        except Exception as e:
            logger.debug(f"Error closing cancelled resource: {e}")


def read_domains(path: str) -> List[str]:
    """
    Read candidate subdomains from a newline-delimited file.

    Order is preserved and duplicates are kept; blank lines are skipped.

    Args:
        path: Path to the domains file

    Returns:
        List[str]: Domains in file order

    Raises:
        OSError: If the file cannot be opened
    """
    with open(path, 'r') as f:
        return list(_iter_domains(f))


def _iter_domains(lines) -> Iterator[str]:
    for line in lines:
        domain = line.strip()
        if domain:
            yield domain


def parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"
