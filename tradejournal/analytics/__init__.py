"""Performance analytics."""

from tradejournal.analytics.aggregator import AnalyticsAggregator, compute_report
from tradejournal.analytics.types import (
    AnalyticsReport,
    BucketStats,
    CurrencyStats,
    DayPnL,
    GroupStats,
    Streak,
    StreakKind,
)

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsReport",
    "BucketStats",
    "CurrencyStats",
    "DayPnL",
    "GroupStats",
    "Streak",
    "StreakKind",
    "compute_report",
]
