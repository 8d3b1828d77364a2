import pytest

from healthmon.errors import StallDetected
from healthmon.tracker import LivenessTracker


def test_increasing_blocks_never_stall(clock):
    tracker = LivenessTracker(stall_threshold=30, clock=clock)
    for number in (10, 11, 12):
        clock.advance(20)
        tracker.observe(number)
        tracker.check_liveness()


def test_repeated_block_stalls_after_threshold(clock):
    tracker = LivenessTracker(stall_threshold=30, clock=clock)
    tracker.observe(10)
    for _ in range(3):
        clock.advance(10)
        tracker.observe(10)
        tracker.check_liveness()

    clock.advance(5)
    tracker.observe(10)
    with pytest.raises(StallDetected) as exc_info:
        tracker.check_liveness()
    assert exc_info.value.elapsed == pytest.approx(35)


def test_grace_period_before_first_observation(clock):
    tracker = LivenessTracker(stall_threshold=30, clock=clock)
    clock.advance(29)
    tracker.check_liveness()
    clock.advance(2)
    with pytest.raises(StallDetected):
        tracker.check_liveness()


def test_first_observation_starts_fresh(clock):
    tracker = LivenessTracker(stall_threshold=30, clock=clock)
    clock.advance(25)
    tracker.observe(500)
    clock.advance(25)
    tracker.check_liveness()
    assert tracker.last_observed_number == 500


def test_regression_does_not_refresh_clock(clock):
    tracker = LivenessTracker(stall_threshold=30, clock=clock)
    tracker.observe(100)
    advanced_at = tracker.last_advance_time

    clock.advance(20)
    tracker.observe(90)
    assert tracker.last_advance_time == advanced_at
    assert tracker.last_observed_number == 90

    clock.advance(5)
    tracker.observe(91)
    assert tracker.last_advance_time == clock.now


def test_regression_stalls_if_no_progress_follows(clock):
    tracker = LivenessTracker(stall_threshold=30, clock=clock)
    tracker.observe(100)
    clock.advance(20)
    tracker.observe(90)
    clock.advance(20)
    tracker.observe(90)
    with pytest.raises(StallDetected):
        tracker.check_liveness()


def test_trackers_are_independent(clock):
    a = LivenessTracker(stall_threshold=30, clock=clock)
    b = LivenessTracker(stall_threshold=30, clock=clock)
    a.observe(1)
    clock.advance(31)
    b.observe(1)
    b.check_liveness()
    with pytest.raises(StallDetected):
        a.check_liveness()


def test_rejects_non_positive_threshold():
    with pytest.raises(ValueError):
        LivenessTracker(stall_threshold=0)
