"""Query/filter layer - named range views and record-type dispatch for screens."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum
from typing import NamedTuple

from baby_tracker.errors import ValidationError
from baby_tracker.models import Record, RecordKind
from baby_tracker.persistence import RecordStore

logger = logging.getLogger(__name__)

PAST_DAYS = 7


class ViewType(str, Enum):
    """Named time windows used by the record screens."""

    TODAY = "today"
    PAST_7_DAYS = "past7days"

    @classmethod
    def parse(cls, value: "str | ViewType") -> "ViewType":
        if isinstance(value, ViewType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown view {value!r}. Use today or past7days") from None


class DateRange(NamedTuple):
    start: datetime
    end: datetime


def range_for(view_type: "ViewType | str", now: datetime) -> DateRange:
    """today: midnight to now. past7days: now minus 7 days to now."""
    view = ViewType.parse(view_type)
    if view is ViewType.TODAY:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return DateRange(midnight, now)
    return DateRange(now - timedelta(days=PAST_DAYS), now)


class RecordQueryService:
    """Range-filtered reads. Screens go through here instead of querying tables."""

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._clock = clock

    def range_for(self, view_type: "ViewType | str") -> DateRange:
        return range_for(view_type, self._clock())

    async def filter_by_range(self, kind: "RecordKind | str", date_range: DateRange) -> list[Record]:
        """Records inside [start, end], newest first. Future-dated records are excluded."""
        start, end = date_range
        if end < start:
            raise ValidationError("Range end is before range start")
        records = await self._store.list_since(kind, start, until=end)
        logger.debug("%s records in range %s - %s: %d", RecordKind.parse(kind).value, start, end, len(records))
        return records

    async def records_for_view(
        self,
        kind: "RecordKind | str",
        view_type: "ViewType | str",
    ) -> tuple[DateRange, list[Record]]:
        date_range = self.range_for(view_type)
        return date_range, await self.filter_by_range(kind, date_range)
