"""Derived metrics and chart series."""

from baby_tracker.metrics.charts import ChartSeries, feeding_chart, growth_chart, sleep_chart
from baby_tracker.metrics.derived import (
    NOT_AVAILABLE,
    AnomalyLog,
    amount_to_ordinal,
    chart_series,
    format_elapsed,
    format_sleep_duration,
    sleep_chart_value,
    sleep_duration_minutes,
)

__all__ = [
    "NOT_AVAILABLE",
    "AnomalyLog",
    "ChartSeries",
    "amount_to_ordinal",
    "chart_series",
    "feeding_chart",
    "format_elapsed",
    "format_sleep_duration",
    "growth_chart",
    "sleep_chart",
    "sleep_chart_value",
    "sleep_duration_minutes",
]
