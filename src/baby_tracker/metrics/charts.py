"""Chart-ready series for the feeding, sleep and growth screens."""

from collections.abc import Sequence

from pydantic import BaseModel, Field

from baby_tracker.config import get_display_config, get_settings
from baby_tracker.errors import ValidationError
from baby_tracker.metrics.derived import (
    AnomalyLog,
    amount_to_ordinal,
    chart_series,
    sleep_chart_value,
    strftime_label,
)
from baby_tracker.models import FeedingRecord, GrowthRecord, SleepRecord

GROWTH_METRICS = ("height", "weight")


class ChartSeries(BaseModel):
    """Parallel label/value lists for a simple line or bar chart."""

    title: str
    dates: list[str] = Field(default_factory=list)
    values: list[float] = Field(default_factory=list)


def _chart_format(key: str) -> str:
    return get_display_config(str(get_settings().config_dir or ""))["chart"][key]


def feeding_chart(
    records: Sequence[FeedingRecord],
    anomalies: AnomalyLog | None = None,
    date_format: str | None = None,
) -> ChartSeries:
    """Feeding amounts as 0-3 ordinals."""
    dates, values = chart_series(
        records,
        lambda r: amount_to_ordinal(r.amount, anomalies),
        strftime_label(date_format or _chart_format("date_format"), lambda r: r.datetime),
    )
    return ChartSeries(title="Feeding amount", dates=dates, values=values)


def sleep_chart(
    records: Sequence[SleepRecord],
    anomalies: AnomalyLog | None = None,
    date_format: str | None = None,
) -> ChartSeries:
    """Sleep duration in minutes per session."""
    dates, values = chart_series(
        records,
        lambda r: sleep_chart_value(r, anomalies),
        strftime_label(date_format or _chart_format("date_format"), lambda r: r.start),
    )
    return ChartSeries(title="Sleep minutes", dates=dates, values=values)


def growth_chart(
    records: Sequence[GrowthRecord],
    metric: str = "weight",
    date_format: str | None = None,
) -> ChartSeries:
    """Height (cm) or weight (kg) over time."""
    if metric not in GROWTH_METRICS:
        raise ValidationError(f"Unknown growth metric {metric!r}. Use height or weight")
    dates, values = chart_series(
        records,
        lambda r: getattr(r, metric),
        strftime_label(date_format or _chart_format("growth_date_format"), lambda r: r.date),
    )
    unit = "cm" if metric == "height" else "kg"
    return ChartSeries(title=f"{metric.capitalize()} ({unit})", dates=dates, values=values)
