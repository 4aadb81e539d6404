"""Performance analytics over a user's closed trades."""

import logging
import math
from datetime import date
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

from tradejournal.analytics.types import (
    AnalyticsReport,
    BucketStats,
    CurrencyStats,
    DayPnL,
    GroupStats,
    Streak,
    StreakKind,
)
from tradejournal.platforms.service import UNKNOWN_PLATFORM, PlatformService
from tradejournal.trades.types import Direction, JournalType, Trade, TradeType

if TYPE_CHECKING:
    from tradejournal.persistence.repository import Repository

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"


def _pnl(trade: Trade) -> float:
    return trade.pnl or 0.0


def _currency(trade: Trade) -> str:
    return trade.currency or DEFAULT_CURRENCY


def _rate(wins: int, trades: int) -> float:
    """Win rate on a 0-100 scale."""
    return wins / trades * 100 if trades > 0 else 0.0


def profit_factor(total_profit: float, total_loss: float) -> float:
    """Gross profit / gross loss; inf with no losses but some profit, 0 with neither."""
    if total_loss > 0:
        return total_profit / total_loss
    return math.inf if total_profit > 0 else 0.0


def currency_breakdown(trades: Iterable[Trade]) -> dict[str, CurrencyStats]:
    """Per-currency PnL statistics, keyed in order of first appearance."""
    stats: dict[str, CurrencyStats] = {}

    for trade in trades:
        currency = _currency(trade)
        if currency not in stats:
            stats[currency] = CurrencyStats()
        entry = stats[currency]

        pnl = _pnl(trade)
        entry.trades += 1
        entry.total_pnl += pnl
        if pnl > 0:
            entry.wins += 1
            entry.total_profit += pnl
            entry.largest_win = max(entry.largest_win, pnl)
        elif pnl < 0:
            entry.losses += 1
            entry.total_loss += abs(pnl)
            entry.largest_loss = max(entry.largest_loss, abs(pnl))

    for entry in stats.values():
        entry.avg_win = entry.total_profit / entry.wins if entry.wins else 0.0
        entry.avg_loss = entry.total_loss / entry.losses if entry.losses else 0.0
        entry.profit_factor = profit_factor(entry.total_profit, entry.total_loss)

        # Rates as fractions; breakeven trades fall on the loss side
        win_rate = entry.wins / entry.trades if entry.trades else 0.0
        loss_rate = 1 - win_rate
        entry.expectancy = win_rate * entry.avg_win - loss_rate * entry.avg_loss

    return stats


def bucket_stats(trades: list[Trade]) -> BucketStats:
    """Counts and summed PnL across currencies."""
    wins = sum(1 for t in trades if _pnl(t) > 0)
    return BucketStats(
        trades=len(trades),
        wins=wins,
        win_rate=_rate(wins, len(trades)),
        pnl=sum(_pnl(t) for t in trades),
    )


def streaks(trades: Iterable[Trade]) -> tuple[Streak, int, int]:
    """
    Current and longest win/loss streaks.

    Trades are ordered most recent first by exit date (entry date if no
    exit). The current streak is the run of same-outcome trades starting
    from the most recent one. Breakeven trades are skipped: they neither
    extend nor break any run.

    Returns:
        (current_streak, longest_win_streak, longest_loss_streak)
    """
    ordered = sorted(trades, key=lambda t: t.activity_date, reverse=True)

    current = Streak()
    current_done = False
    win_run = 0
    loss_run = 0
    longest_win = 0
    longest_loss = 0

    for trade in ordered:
        pnl = _pnl(trade)
        if pnl > 0:
            outcome = StreakKind.WIN
            win_run += 1
            loss_run = 0
        elif pnl < 0:
            outcome = StreakKind.LOSS
            loss_run += 1
            win_run = 0
        else:
            continue

        if not current_done:
            if current.kind is StreakKind.NONE:
                current = Streak(kind=outcome, count=1)
            elif current.kind is outcome:
                current.count += 1
            else:
                current_done = True

        longest_win = max(longest_win, win_run)
        longest_loss = max(longest_loss, loss_run)

    return current, longest_win, longest_loss


def daily_pnl(trades: Iterable[Trade]) -> dict[date, DayPnL]:
    """
    Summed PnL per calendar day of exit (or entry).

    A day's currency is that of the last trade seen for it; amounts in
    different currencies are summed as-is.
    """
    days: dict[date, DayPnL] = {}
    for trade in trades:
        day = trade.activity_date.date()
        if day not in days:
            days[day] = DayPnL(date=day, pnl=0.0, currency=_currency(trade))
        days[day].pnl += _pnl(trade)
        days[day].currency = _currency(trade)
    return days


def best_and_worst_day(days: Iterable[DayPnL]) -> tuple[DayPnL | None, DayPnL | None]:
    """Highest and lowest PnL days; ties go to the day seen first."""
    best: DayPnL | None = None
    worst: DayPnL | None = None
    for day in days:
        if best is None or day.pnl > best.pnl:
            best = day
        if worst is None or day.pnl < worst.pnl:
            worst = day
    return best, worst


def group_stats(
    trades: Iterable[Trade],
    key: Callable[[Trade], str],
) -> list[GroupStats]:
    """
    Trades, win rate and summed PnL per key, in order of first appearance.

    A group's currency is that of its first trade.
    """
    groups: dict[str, GroupStats] = {}
    for trade in trades:
        name = key(trade)
        if name not in groups:
            groups[name] = GroupStats(key=name, currency=_currency(trade))
        group = groups[name]
        group.trades += 1
        group.pnl += _pnl(trade)
        if _pnl(trade) > 0:
            group.wins += 1

    for group in groups.values():
        group.win_rate = _rate(group.wins, group.trades)
    return list(groups.values())


def month_key(trade: Trade) -> str:
    """YYYY-MM of the trade's exit (or entry) date."""
    moment = trade.activity_date
    return f"{moment.year}-{moment.month:02d}"


def average_holding_hours(trades: Iterable[Trade]) -> float:
    """Mean exit - entry time in hours over trades that have both dates."""
    total_seconds = 0.0
    count = 0
    for trade in trades:
        if trade.exit_date is not None and trade.entry_date is not None:
            total_seconds += (trade.exit_date - trade.entry_date).total_seconds()
            count += 1
    return total_seconds / count / 3600 if count else 0.0


def average_risk_reward(trades: Iterable[Trade]) -> float:
    """Mean |exit - entry| / |entry - stop_loss| over trades with an exit, a stop and nonzero risk."""
    total = 0.0
    count = 0
    for trade in trades:
        if trade.exit_price is None or trade.stop_loss is None:
            continue
        risk = abs(trade.entry_price - trade.stop_loss)
        if risk > 0:
            total += abs(trade.exit_price - trade.entry_price) / risk
            count += 1
    return total / count if count else 0.0


def compute_report(
    trades: Iterable[Trade],
    platform_names: Mapping[str, str] | None = None,
    top_symbols_limit: int = 10,
) -> AnalyticsReport:
    """
    Build the full analytics report from a trade set.

    Running trades are ignored. Nothing is persisted or rounded.

    Args:
        trades: One owner's trades, already filtered to a journal type
        platform_names: platform_id -> display name; unknown ids report as 'Unknown'
        top_symbols_limit: Number of symbols kept in top_symbols

    Returns:
        AnalyticsReport
    """
    names = platform_names or {}
    closed = [t for t in trades if not t.is_open]

    winning = sum(1 for t in closed if _pnl(t) > 0)
    losing = sum(1 for t in closed if _pnl(t) < 0)
    breakeven = sum(1 for t in closed if _pnl(t) == 0)

    status_breakdown: dict[str, int] = {}
    for trade in closed:
        status_breakdown[trade.status.value] = status_breakdown.get(trade.status.value, 0) + 1

    current, longest_win, longest_loss = streaks(closed)

    days = daily_pnl(closed)
    best_day, worst_day = best_and_worst_day(days.values())

    top_symbols = sorted(
        group_stats(closed, key=lambda t: t.symbol),
        key=lambda g: g.pnl,
        reverse=True,
    )[:top_symbols_limit]

    platform_stats = sorted(
        group_stats(closed, key=lambda t: names.get(t.platform_id, UNKNOWN_PLATFORM)),
        key=lambda g: g.pnl,
        reverse=True,
    )

    monthly_stats = sorted(
        group_stats(closed, key=month_key),
        key=lambda g: g.key,
        reverse=True,
    )

    return AnalyticsReport(
        total_trades=len(closed),
        winning_trades=winning,
        losing_trades=losing,
        breakeven_trades=breakeven,
        win_rate=_rate(winning, len(closed)),
        pnl_by_currency=currency_breakdown(closed),
        spot=bucket_stats([t for t in closed if t.trade_type == TradeType.SPOT]),
        futures=bucket_stats([t for t in closed if t.trade_type == TradeType.FUTURES]),
        long=bucket_stats([t for t in closed if t.direction == Direction.LONG]),
        short=bucket_stats([t for t in closed if t.direction == Direction.SHORT]),
        status_breakdown=status_breakdown,
        current_streak=current,
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
        trading_days=len(days),
        avg_trades_per_day=len(closed) / len(days) if days else 0.0,
        best_day=best_day,
        worst_day=worst_day,
        top_symbols=top_symbols,
        platform_stats=platform_stats,
        monthly_stats=monthly_stats,
        avg_risk_reward_ratio=average_risk_reward(closed),
        avg_holding_time_hours=average_holding_hours(closed),
    )


class AnalyticsAggregator:
    """Loads an owner's trades and platform names and builds the report on demand."""

    def __init__(
        self,
        repository: "Repository",
        platforms: PlatformService,
        top_symbols_limit: int = 10,
    ) -> None:
        self._repo = repository
        self._platforms = platforms
        self._top_symbols_limit = top_symbols_limit

    async def build_report(
        self,
        owner_id: str,
        journal_type: JournalType = JournalType.CRYPTO,
    ) -> AnalyticsReport:
        trades = await self._repo.find_trades(owner_id, journal_type=journal_type)
        names = await self._platforms.platform_names(owner_id)

        report = compute_report(trades, names, self._top_symbols_limit)
        logger.debug(
            "Analytics for %s/%s: %d closed of %d trades",
            owner_id,
            journal_type.value,
            report.total_trades,
            len(trades),
        )
        return report
