from datetime import datetime, timedelta

import pytest

from baby_tracker.persistence import RecordStore, SettingsStore


class FakeClock:
    """Settable clock for stores and services."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 10, 12, 0))


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "tracker.db"


@pytest.fixture
async def store(db_path, clock):
    record_store = RecordStore(db_path, clock=clock)
    await record_store.open()
    yield record_store
    await record_store.close()


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(tmp_path / "data")
