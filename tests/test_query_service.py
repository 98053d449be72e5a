from datetime import datetime

import pytest

from baby_tracker.errors import ValidationError
from baby_tracker.services import DateRange, RecordQueryService, ViewType, range_for


def test_past7days_range():
    assert range_for("past7days", datetime(2024, 3, 10, 12, 0)) == (
        datetime(2024, 3, 3, 12, 0),
        datetime(2024, 3, 10, 12, 0),
    )


def test_today_range_starts_at_midnight():
    start, end = range_for(ViewType.TODAY, datetime(2024, 3, 10, 12, 34, 56))
    assert start == datetime(2024, 3, 10)
    assert end == datetime(2024, 3, 10, 12, 34, 56)


def test_unknown_view_is_rejected():
    with pytest.raises(ValidationError):
        range_for("lastmonth", datetime(2024, 3, 10))


async def test_today_view_excludes_future_and_yesterday(store, clock):
    query = RecordQueryService(store, clock=clock)
    await store.insert("feeding", {"datetime": "2024-03-09T23:00:00"})
    await store.insert("feeding", {"datetime": "2024-03-10T07:00:00"})
    await store.insert("feeding", {"datetime": "2024-03-10T11:59:00"})
    await store.insert("feeding", {"datetime": "2024-03-10T18:00:00"})

    date_range, records = await query.records_for_view("feeding", "today")

    assert date_range == DateRange(datetime(2024, 3, 10), clock.now)
    assert [r.datetime.hour for r in records] == [11, 7]


async def test_past7days_dispatches_by_record_type(store, clock):
    query = RecordQueryService(store, clock=clock)
    await store.insert("sleep", {"start": "2024-03-02T20:00:00", "end": "2024-03-03T06:00:00"})
    await store.insert("sleep", {"start": "2024-03-05T20:00:00", "end": "2024-03-06T06:00:00"})
    await store.insert("feeding", {"datetime": "2024-03-05T20:00:00"})

    records = await query.filter_by_range("sleep", query.range_for("past7days"))

    assert len(records) == 1
    assert records[0].start == datetime(2024, 3, 5, 20, 0)


async def test_inverted_range_is_rejected(store):
    query = RecordQueryService(store)
    with pytest.raises(ValidationError):
        await query.filter_by_range("feeding", DateRange(datetime(2024, 3, 10), datetime(2024, 3, 9)))
