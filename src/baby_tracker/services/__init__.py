"""Screen-facing services."""

from baby_tracker.services.query_service import DateRange, RecordQueryService, ViewType, range_for
from baby_tracker.services.sleep_tracker import SleepTracker, TrackerState

__all__ = [
    "DateRange",
    "RecordQueryService",
    "SleepTracker",
    "TrackerState",
    "ViewType",
    "range_for",
]
