"""Derived metrics - pure functions over stored records."""

import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime, timedelta
from typing import Any, TypeVar

from baby_tracker.errors import DataAnomaly, NegativeDuration
from baby_tracker.models import FeedingAmount, SleepRecord
from baby_tracker.models.records import to_local_naive

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

AMOUNT_ORDINALS: dict[FeedingAmount, int] = {
    FeedingAmount.NONE: 0,
    FeedingAmount.LITTLE: 1,
    FeedingAmount.NORMAL: 2,
    FeedingAmount.A_LOT: 3,
}

R = TypeVar("R")
V = TypeVar("V")


class AnomalyLog:
    """Collects data anomalies seen while deriving display values."""

    def __init__(self) -> None:
        self._entries: list[DataAnomaly] = []

    def record(self, anomaly: DataAnomaly) -> None:
        logger.warning("Data anomaly: %s", anomaly)
        self._entries.append(anomaly)

    @property
    def entries(self) -> list[DataAnomaly]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DataAnomaly]:
        return iter(self._entries)


def _report(anomaly: DataAnomaly, anomalies: AnomalyLog | None) -> None:
    if anomalies is not None:
        anomalies.record(anomaly)
    else:
        logger.warning("Data anomaly: %s", anomaly)


def sleep_duration_minutes(start: datetime, end: datetime | None) -> int | str:
    """
    Whole minutes slept, floored. "N/A" while the session is open.
    Raises NegativeDuration when end is before start.
    """
    if end is None:
        return NOT_AVAILABLE
    delta = to_local_naive(end) - to_local_naive(start)
    if delta < timedelta(0):
        raise NegativeDuration(f"Sleep ends before it starts ({start.isoformat()} > {end.isoformat()})")
    return int(delta.total_seconds() // 60)


def format_sleep_duration(
    start: datetime,
    end: datetime | None,
    anomalies: AnomalyLog | None = None,
) -> str:
    """Display form, e.g. "510 minutes". Negative durations show as N/A."""
    try:
        minutes = sleep_duration_minutes(start, end)
    except NegativeDuration as e:
        _report(e, anomalies)
        return NOT_AVAILABLE
    if minutes == NOT_AVAILABLE:
        return NOT_AVAILABLE
    return f"{minutes} minutes"


def sleep_chart_value(record: SleepRecord, anomalies: AnomalyLog | None = None) -> int:
    """Minutes for charting. Open sessions and negative durations chart as 0."""
    try:
        minutes = sleep_duration_minutes(record.start, record.end)
    except NegativeDuration as e:
        _report(e, anomalies)
        return 0
    return 0 if minutes == NOT_AVAILABLE else minutes


def amount_to_ordinal(amount: Any, anomalies: AnomalyLog | None = None) -> int:
    """none=0, little=1, normal=2, a lot=3. Unrecognized values map to 0."""
    parsed = amount if isinstance(amount, FeedingAmount) else None
    if parsed is None and isinstance(amount, str):
        parsed = FeedingAmount.parse(amount)
    if parsed is None:
        _report(DataAnomaly(f"Unrecognized feeding amount {amount!r}"), anomalies)
        return 0
    return AMOUNT_ORDINALS[parsed]


def format_elapsed(seconds: float) -> str:
    """Running timer text, e.g. "3m 7s"."""
    total = max(0, int(seconds))
    minutes, remaining = divmod(total, 60)
    return f"{minutes}m {remaining}s"


def chart_series(
    records: Iterable[R],
    value_fn: Callable[[R], V],
    date_format_fn: Callable[[R], str],
) -> tuple[list[str], list[V]]:
    """Parallel (dates, values) in input order."""
    dates: list[str] = []
    values: list[V] = []
    for record in records:
        dates.append(date_format_fn(record))
        values.append(value_fn(record))
    return dates, values


def strftime_label(fmt: str, get_time: Callable[[R], datetime]) -> Callable[[R], str]:
    """Date label function from a strftime format and a timestamp accessor."""

    def label(record: R) -> str:
        return get_time(record).strftime(fmt)

    return label

