from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChainKind(str, Enum):
    EXECUTION = "execution"
    BEACON = "beacon"
    AVAX = "avax"

    @property
    def default_port(self) -> int:
        return _DEFAULT_PORTS[self]


_DEFAULT_PORTS = {
    ChainKind.EXECUTION: 8545,
    ChainKind.BEACON: 4000,
    ChainKind.AVAX: 9650,
}


@dataclass(frozen=True)
class SyncInfo:
    """eth_syncing progress object, heights already decoded."""

    current_block: int
    highest_block: int

    @property
    def distance(self) -> int:
        # highest_block is 0 while a node is still discovering peers
        if self.highest_block < self.current_block:
            return 0
        return self.highest_block - self.current_block


class SyncState(Enum):
    NOT_SYNCING = "not_syncing"
    SYNCING_WITH_DISTANCE = "syncing_with_distance"
    SYNCING_UNKNOWN = "syncing_unknown"


@dataclass(frozen=True)
class SyncStatus:
    state: SyncState
    distance: Optional[int] = None

    @classmethod
    def not_syncing(cls) -> "SyncStatus":
        return cls(SyncState.NOT_SYNCING)

    @classmethod
    def with_distance(cls, distance: int) -> "SyncStatus":
        return cls(SyncState.SYNCING_WITH_DISTANCE, distance)

    @classmethod
    def unknown(cls) -> "SyncStatus":
        return cls(SyncState.SYNCING_UNKNOWN)


@dataclass(frozen=True)
class Block:
    number: int
    timestamp: int  # unix seconds
