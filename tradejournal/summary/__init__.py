"""Daily PnL summaries."""

from tradejournal.summary.daily import DailyAggregateUpdater, day_bounds, summarize_day
from tradejournal.summary.types import DailySummary

__all__ = [
    "DailyAggregateUpdater",
    "DailySummary",
    "day_bounds",
    "summarize_day",
]
