import pytest

from healthmon.adapter import ChainAdapter
from healthmon.errors import StaleBlock, StallDetected, seconds_to_human_readable
from healthmon.models import Block, SyncStatus


class StaticAdapter(ChainAdapter):
    def __init__(self, block, **kwargs):
        super().__init__("memory://node", 1, **kwargs)
        self.block = block

    def get_sync_status(self, token):
        return SyncStatus.not_syncing()

    def get_latest_block(self, token):
        return self.block


def test_chain_adapter_is_abstract():
    with pytest.raises(TypeError):
        ChainAdapter("http://node", 1)


def test_partial_subclass_is_abstract():
    class SyncOnly(ChainAdapter):
        def get_sync_status(self, token):
            return SyncStatus.not_syncing()

    with pytest.raises(TypeError):
        SyncOnly("http://node", 1)


def test_concrete_subclass_runs_shared_policy():
    adapter = StaticAdapter(Block(number=7, timestamp=1000), now=lambda: 1010)
    adapter.is_ready()
    assert adapter.tracker.last_observed_number == 7


@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (-3.5, "0s"),
    (45.9, "45s"),
    (400, "6m 40s"),
    (3_725, "1h 2m 5s"),
    (90_061, "1d 1h 1m 1s"),
])
def test_seconds_to_human_readable(seconds, expected):
    assert seconds_to_human_readable(seconds) == expected


def test_durations_in_messages():
    assert str(StaleBlock(65.2)) == "latest block is too old: 1m 5s"
    assert str(StallDetected(3_600)) == "no new block for 1h 0m 0s"
