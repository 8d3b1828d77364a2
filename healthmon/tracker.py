"""
Block progression liveness.

A node can legitimately return the same head block on several consecutive
polls (block time > poll interval). It is only considered stalled when the
head number has not advanced for longer than `stall_threshold` seconds.
"""

import logging
import time
from typing import Callable, Optional

from healthmon.errors import StallDetected

LOG = logging.getLogger(__name__)

# 5 x 12s Ethereum slots. Override per target with --stall-threshold.
DEFAULT_STALL_THRESHOLD_S = 60.0


class LivenessTracker:
    """
    Owned by exactly one adapter; not thread-safe and not meant to be shared.

    Regression policy: a lower block number (reorg, node restart onto an older
    head) is remembered as the new reference so the next higher number counts
    as progress, but it never refreshes the stall clock by itself.
    """

    def __init__(
        self,
        stall_threshold: float = DEFAULT_STALL_THRESHOLD_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if stall_threshold <= 0:
            raise ValueError("stall_threshold must be positive")
        self.stall_threshold = stall_threshold
        self._clock = clock
        self.last_observed_number: Optional[int] = None
        self.last_advance_time: float = clock()

    def observe(self, number: int) -> None:
        last = self.last_observed_number
        if last is None or number > last:
            self.last_observed_number = number
            self.last_advance_time = self._clock()
        elif number < last:
            LOG.warning("block number went backwards: %d -> %d", last, number)
            self.last_observed_number = number

    def elapsed(self) -> float:
        return self._clock() - self.last_advance_time

    def check_liveness(self) -> None:
        elapsed = self.elapsed()
        if elapsed > self.stall_threshold:
            raise StallDetected(elapsed)
