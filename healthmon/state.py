"""
Readiness verdict shared between the poll loop (single writer) and the HTTP
handlers (many readers).
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    healthy: bool
    last_error: Optional[str]


class ReadinessState:
    """
    Holds one immutable Snapshot; writers swap it under a lock, readers get
    the current object, so both fields always come from the same update.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = Snapshot(healthy=False, last_error="no evaluation yet")

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def is_healthy(self) -> bool:
        return self.snapshot().healthy

    def last_error(self) -> Optional[str]:
        return self.snapshot().last_error

    def mark_healthy(self) -> None:
        with self._lock:
            previous = self._snapshot
            self._snapshot = Snapshot(healthy=True, last_error=None)
        if not previous.healthy:
            LOG.info("node is ready")

    def mark_unhealthy(self, error: BaseException) -> None:
        message = str(error) or type(error).__name__
        with self._lock:
            self._snapshot = Snapshot(healthy=False, last_error=message)
        LOG.warning("node is not ready: %s", message)
