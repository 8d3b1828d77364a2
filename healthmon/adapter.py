"""
Chain-independent readiness evaluation.

Subclasses only know how to talk to their node (get_sync_status,
get_latest_block); the policy below is shared by every chain kind.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from healthmon.errors import AmbiguousSyncStatus, StaleBlock, SyncLag
from healthmon.models import Block, SyncState, SyncStatus
from healthmon.tracker import LivenessTracker

LOG = logging.getLogger(__name__)

FRESHNESS_WINDOW_S = 300


class ChainAdapter(ABC):
    def __init__(
        self,
        url: str,
        timeout: float,
        sync_tolerance: int = 0,
        tracker: Optional[LivenessTracker] = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.sync_tolerance = sync_tolerance
        self.tracker = tracker if tracker is not None else LivenessTracker()
        self._now = now

    @abstractmethod
    def get_sync_status(self, token: Optional[str]) -> SyncStatus:
        ...

    @abstractmethod
    def get_latest_block(self, token: Optional[str]) -> Block:
        ...

    def is_ready(self, token: Optional[str] = None) -> None:
        """Run one evaluation; returns None when ready, raises ReadinessError otherwise."""
        self.check_sync(self.get_sync_status(token))

        block = self.get_latest_block(token)
        self.tracker.observe(block.number)

        age = self._now() - block.timestamp
        if age > FRESHNESS_WINDOW_S:
            raise StaleBlock(age)

        self.tracker.check_liveness()

    def check_sync(self, status: SyncStatus) -> None:
        if status.state is SyncState.NOT_SYNCING:
            return
        if status.state is SyncState.SYNCING_UNKNOWN:
            raise AmbiguousSyncStatus()

        distance = status.distance or 0
        if distance > self.sync_tolerance:
            raise SyncLag(distance, self.sync_tolerance)
        if distance > 0:
            LOG.info("Node is syncing but within tolerance (%d <= %d). Checking block age...",
                     distance, self.sync_tolerance)
