from datetime import datetime

import pytest

from baby_tracker.errors import TrackingStateError, ValidationError
from baby_tracker.metrics import sleep_duration_minutes
from baby_tracker.persistence import RecordStore
from baby_tracker.services import SleepTracker, TrackerState


async def test_stop_at_start_time_fails_and_keeps_tracking(store, clock):
    tracker = SleepTracker(store, clock=clock)
    tracker.start_tracking()

    with pytest.raises(ValidationError):
        await tracker.stop_tracking()

    assert tracker.state is TrackerState.TRACKING
    assert await store.list_since("sleep", None) == []


async def test_stop_persists_completed_record(store, clock):
    tracker = SleepTracker(store, clock=clock)
    started = tracker.start_tracking()
    clock.advance(minutes=95, seconds=30)

    assert tracker.elapsed_seconds() == 95 * 60 + 30
    record = await tracker.stop_tracking()

    assert tracker.state is TrackerState.IDLE
    assert record.start == started
    assert record.end == datetime(2024, 3, 10, 13, 35, 30)
    assert sleep_duration_minutes(record.start, record.end) == 95
    assert [r.id for r in await store.list_since("sleep", None)] == [record.id]


async def test_second_start_is_rejected(store, clock):
    tracker = SleepTracker(store, clock=clock)
    tracker.start_tracking()
    with pytest.raises(TrackingStateError):
        tracker.start_tracking()


async def test_stop_while_idle_is_rejected(store, clock):
    tracker = SleepTracker(store, clock=clock)
    with pytest.raises(TrackingStateError):
        await tracker.stop_tracking()


async def test_cancel_discards_session(store, clock):
    tracker = SleepTracker(store, clock=clock)
    tracker.start_tracking()
    clock.advance(minutes=5)
    tracker.cancel_tracking()

    assert tracker.state is TrackerState.IDLE
    assert tracker.elapsed_seconds() == 0
    assert await store.list_since("sleep", None) == []


async def test_sub_millisecond_session_keeps_end_after_start(store, clock):
    clock.now = datetime(2024, 3, 10, 12, 0, 0, 100)
    tracker = SleepTracker(store, clock=clock)
    tracker.start_tracking()
    clock.advance(microseconds=800)

    record = await tracker.stop_tracking()

    assert record.start == datetime(2024, 3, 10, 12, 0, 0, 100)
    assert record.end == datetime(2024, 3, 10, 12, 0, 0, 900)
    assert record.end > record.start


async def test_one_session_per_store_across_trackers(store, clock):
    first = SleepTracker(store, clock=clock)
    second = SleepTracker(store, clock=clock)
    first.start_tracking()

    with pytest.raises(TrackingStateError):
        second.start_tracking()
    assert second.state is TrackerState.IDLE

    first.cancel_tracking()
    second.start_tracking()
    clock.advance(minutes=10)
    await second.stop_tracking()

    first.start_tracking()
    assert first.state is TrackerState.TRACKING


async def test_trackers_on_different_stores_are_independent(store, clock, tmp_path):
    other = RecordStore(tmp_path / "other.db", clock=clock)
    await other.open()
    try:
        SleepTracker(store, clock=clock).start_tracking()
        tracker = SleepTracker(other, clock=clock)
        tracker.start_tracking()
        assert tracker.state is TrackerState.TRACKING
    finally:
        await other.close()
