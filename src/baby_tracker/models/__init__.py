"""Data models."""

from baby_tracker.models.baby_profile import Profile
from baby_tracker.models.records import (
    FeedingAmount,
    FeedingFields,
    FeedingRecord,
    GrowthFields,
    GrowthRecord,
    Record,
    RecordKind,
    SleepFields,
    SleepRecord,
)

__all__ = [
    "FeedingAmount",
    "FeedingFields",
    "FeedingRecord",
    "GrowthFields",
    "GrowthRecord",
    "Profile",
    "Record",
    "RecordKind",
    "SleepFields",
    "SleepRecord",
]
