"""Per-day PnL aggregation for the calendar view."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from tradejournal.summary.types import DailySummary
from tradejournal.trades.types import JournalType, Trade

if TYPE_CHECKING:
    from tradejournal.persistence.repository import Repository

logger = logging.getLogger(__name__)


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Local calendar day containing moment: 00:00:00.000 to 23:59:59.999."""
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    end = moment.replace(hour=23, minute=59, second=59, microsecond=999000)
    return start, end


def summarize_day(
    owner_id: str,
    day: datetime,
    journal_type: JournalType,
    trades: Iterable[Trade],
) -> DailySummary:
    """Build a summary from the trades exited on day. Zero-PnL trades count only toward the total."""
    total_pnl = 0.0
    total_trades = 0
    winning = 0
    losing = 0

    for trade in trades:
        pnl = trade.pnl or 0.0
        total_pnl += pnl
        total_trades += 1
        if pnl > 0:
            winning += 1
        elif pnl < 0:
            losing += 1

    return DailySummary(
        owner_id=owner_id,
        date=day,
        journal_type=journal_type,
        total_pnl=total_pnl,
        total_trades=total_trades,
        winning_trades=winning,
        losing_trades=losing,
        updated_at=datetime.now(),
    )


class DailyAggregateUpdater:
    """Recomputes daily summaries from scratch.

    A recompute always rebuilds the whole day from stored trades and fully
    overwrites the stored summary, so it can be re-run or triggered out of
    order without drifting.
    """

    def __init__(self, repository: "Repository", summary_limit: int = 90) -> None:
        self._repo = repository
        self._summary_limit = summary_limit

    async def recompute(
        self,
        owner_id: str,
        date: datetime,
        journal_type: JournalType,
    ) -> DailySummary:
        """
        Rebuild and upsert the summary for the day containing date.

        Args:
            owner_id: Owner whose trades are aggregated
            date: Any moment within the day
            journal_type: Journal partition to aggregate

        Returns:
            The stored DailySummary
        """
        start, end = day_bounds(date)
        trades = await self._repo.get_trades_exited_between(
            owner_id, journal_type, start, end
        )

        summary = summarize_day(owner_id, start, journal_type, trades)
        await self._repo.upsert_daily_summary(summary)

        logger.debug(
            "Daily summary %s %s: pnl=%.2f trades=%d (W%d/L%d)",
            start.strftime("%Y-%m-%d"),
            journal_type.value,
            summary.total_pnl,
            summary.total_trades,
            summary.winning_trades,
            summary.losing_trades,
            extra={
                "extra_data": {
                    "day": start.date().isoformat(),
                    "journal_type": journal_type.value,
                    "total_pnl": summary.total_pnl,
                    "total_trades": summary.total_trades,
                }
            },
        )
        return summary

    async def list_summaries(
        self,
        owner_id: str,
        journal_type: JournalType,
        limit: int | None = None,
    ) -> list[DailySummary]:
        """Most recent summaries, newest first."""
        return await self._repo.get_daily_summaries(
            owner_id, journal_type, limit or self._summary_limit
        )
