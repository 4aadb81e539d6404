"""Tests for the analytics report."""

import math
from datetime import date, datetime, timedelta

import pytest

from tradejournal.analytics.aggregator import (
    AnalyticsAggregator,
    average_holding_hours,
    average_risk_reward,
    compute_report,
    profit_factor,
    streaks,
)
from tradejournal.analytics.types import StreakKind
from tradejournal.platforms.types import PlatformType
from tradejournal.trades.types import Direction, JournalType, TradeStatus, TradeType

from tests.fixtures import BASE_TIME, create_closed_trade, create_trade


def _sequence(pnls, start=BASE_TIME):
    """Closed trades exiting one hour apart, oldest first."""
    return [
        create_closed_trade(pnl, exit_date=start + timedelta(hours=i))
        for i, pnl in enumerate(pnls)
    ]


class TestEmptyReport:
    def test_no_trades(self):
        report = compute_report([])

        assert report.total_trades == 0
        assert report.win_rate == 0
        assert report.pnl_by_currency == {}
        assert report.current_streak.kind == StreakKind.NONE
        assert report.best_day is None
        assert report.worst_day is None
        assert report.avg_trades_per_day == 0

    def test_running_trades_are_ignored(self):
        report = compute_report([create_trade(), create_trade()])

        assert report.total_trades == 0
        assert report.trading_days == 0


class TestCounts:
    def test_win_loss_breakeven(self):
        report = compute_report(_sequence([10, -5, 0, 20]))

        assert report.total_trades == 4
        assert report.winning_trades == 2
        assert report.losing_trades == 1
        assert report.breakeven_trades == 1
        assert report.win_rate == pytest.approx(50.0)

    def test_status_breakdown(self):
        trades = [
            create_closed_trade(10, status=TradeStatus.TP1),
            create_closed_trade(12, status=TradeStatus.TP1),
            create_closed_trade(-3, status=TradeStatus.STOPLOSS),
        ]

        report = compute_report(trades)

        assert report.status_breakdown == {"tp1": 2, "stoploss": 1}


class TestCurrencyBreakdown:
    def test_per_currency_stats(self):
        trades = [
            create_closed_trade(30, currency="USD"),
            create_closed_trade(10, currency="USD"),
            create_closed_trade(-20, currency="USD"),
            create_closed_trade(-15000, currency="IDR"),
        ]

        report = compute_report(trades)

        usd = report.pnl_by_currency["USD"]
        assert list(report.pnl_by_currency) == ["USD", "IDR"]
        assert usd.trades == 3
        assert usd.total_pnl == pytest.approx(20)
        assert usd.total_profit == pytest.approx(40)
        assert usd.total_loss == pytest.approx(20)
        assert usd.avg_win == pytest.approx(20)
        assert usd.avg_loss == pytest.approx(20)
        assert usd.largest_win == pytest.approx(30)
        assert usd.largest_loss == pytest.approx(20)
        assert usd.profit_factor == pytest.approx(2.0)
        # 2/3 * 20 - 1/3 * 20
        assert usd.expectancy == pytest.approx(20 / 3)

        idr = report.pnl_by_currency["IDR"]
        assert idr.losses == 1
        assert idr.total_loss == pytest.approx(15000)
        assert idr.profit_factor == 0

    def test_breakeven_counts_toward_loss_rate(self):
        report = compute_report([create_closed_trade(10), create_closed_trade(0)])

        usd = report.pnl_by_currency["USD"]
        assert usd.avg_loss == 0
        assert usd.expectancy == pytest.approx(5.0)

    def test_profit_factor_edges(self):
        assert math.isinf(profit_factor(50.0, 0.0))
        assert profit_factor(0.0, 0.0) == 0
        assert profit_factor(0.0, 10.0) == 0

    def test_all_wins_profit_factor_is_infinite(self):
        report = compute_report(_sequence([5, 7]))

        assert math.isinf(report.pnl_by_currency["USD"].profit_factor)
        assert report.to_dict()["pnl_by_currency"]["USD"]["profit_factor"] == "Infinity"


class TestBuckets:
    def test_type_and_direction_sums_ignore_currency(self):
        trades = [
            create_closed_trade(10, currency="USD", trade_type=TradeType.SPOT),
            create_closed_trade(1000, currency="IDR", trade_type=TradeType.SPOT),
            create_closed_trade(
                -5, trade_type=TradeType.FUTURES, direction=Direction.SHORT, leverage=3.0
            ),
        ]

        report = compute_report(trades)

        assert report.spot.trades == 2
        assert report.spot.pnl == pytest.approx(1010)
        assert report.spot.win_rate == pytest.approx(100)
        assert report.futures.trades == 1
        assert report.futures.wins == 0
        assert report.long.trades == 2
        assert report.short.pnl == pytest.approx(-5)


class TestStreaks:
    def test_latest_loss_after_wins(self):
        """+10, +5, then -3 as the most recent trade."""
        current, longest_win, longest_loss = streaks(_sequence([10, 5, -3]))

        assert current.kind == StreakKind.LOSS
        assert current.count == 1
        assert longest_win == 2
        assert longest_loss == 1

    def test_input_order_does_not_matter(self):
        trades = _sequence([10, 5, -3])

        assert streaks(list(reversed(trades))) == streaks(trades)

    def test_current_streak_stops_at_first_opposite_outcome(self):
        current, longest_win, _ = streaks(_sequence([4, 4, 4, -1, 2, 2]))

        assert current.kind == StreakKind.WIN
        assert current.count == 2
        assert longest_win == 3

    def test_breakeven_is_skipped(self):
        current, longest_win, longest_loss = streaks(_sequence([-2, -2, 0, -2, 0]))

        assert current.kind == StreakKind.LOSS
        assert current.count == 3
        assert longest_loss == 3
        assert longest_win == 0

    def test_only_breakeven(self):
        current, longest_win, longest_loss = streaks(_sequence([0, 0]))

        assert current.kind == StreakKind.NONE
        assert current.count == 0
        assert (longest_win, longest_loss) == (0, 0)


class TestDays:
    def test_trading_days_and_best_worst(self):
        day1 = datetime(2024, 3, 1, 12)
        day2 = datetime(2024, 3, 2, 12)
        day3 = datetime(2024, 3, 3, 12)
        trades = [
            create_closed_trade(10, exit_date=day1),
            create_closed_trade(15, exit_date=day1 + timedelta(hours=1), currency="IDR"),
            create_closed_trade(-8, exit_date=day2),
            create_closed_trade(3, exit_date=day3),
        ]

        report = compute_report(trades)

        assert report.trading_days == 3
        assert report.avg_trades_per_day == pytest.approx(4 / 3)
        assert report.best_day.date == date(2024, 3, 1)
        assert report.best_day.pnl == pytest.approx(25)
        # Last trade seen for the day sets its currency
        assert report.best_day.currency == "IDR"
        assert report.worst_day.date == date(2024, 3, 2)
        assert report.worst_day.pnl == pytest.approx(-8)

    def test_single_day_is_both_best_and_worst(self):
        report = compute_report(_sequence([5, -1]))

        assert report.best_day == report.worst_day


class TestGroups:
    def test_top_symbols_sorted_and_capped(self):
        trades = [
            create_closed_trade(float(i), symbol=f"SYM{i}") for i in range(1, 13)
        ] + [create_closed_trade(-4, symbol="SYM12")]

        report = compute_report(trades)

        assert len(report.top_symbols) == 10
        assert report.top_symbols[0].key == "SYM11"
        assert report.top_symbols[1].key == "SYM10"
        sym12 = next(g for g in report.top_symbols if g.key == "SYM12")
        assert sym12.trades == 2
        assert sym12.win_rate == pytest.approx(50)
        assert sym12.pnl == pytest.approx(8)

    def test_top_symbols_limit_is_configurable(self):
        trades = [create_closed_trade(1, symbol=s) for s in "ABCDE"]

        assert len(compute_report(trades, top_symbols_limit=3).top_symbols) == 3

    def test_group_currency_is_first_trade_currency(self):
        trades = [
            create_closed_trade(1, symbol="BBCA", currency="IDR"),
            create_closed_trade(1, symbol="BBCA", currency="USD"),
        ]

        assert compute_report(trades).top_symbols[0].currency == "IDR"

    def test_platforms_resolve_names_and_are_uncapped(self):
        trades = [
            create_closed_trade(5, platform_id=f"PLT-{i}") for i in range(12)
        ] + [create_closed_trade(-1, platform_id="PLT-deleted")]
        names = {f"PLT-{i}": f"Venue {i}" for i in range(12)}

        report = compute_report(trades, names)

        assert len(report.platform_stats) == 13
        assert report.platform_stats[-1].key == "Unknown"
        assert report.platform_stats[-1].pnl == pytest.approx(-1)

    def test_monthly_stats_most_recent_first(self):
        trades = [
            create_closed_trade(1, exit_date=datetime(2023, 12, 30)),
            create_closed_trade(2, exit_date=datetime(2024, 2, 1)),
            create_closed_trade(-1, exit_date=datetime(2024, 2, 20)),
            create_closed_trade(4, exit_date=datetime(2024, 1, 5)),
        ]

        report = compute_report(trades)

        assert [g.key for g in report.monthly_stats] == ["2024-02", "2024-01", "2023-12"]
        assert report.monthly_stats[0].trades == 2
        assert report.monthly_stats[0].pnl == pytest.approx(1)


class TestRiskAndHolding:
    def test_average_holding_hours(self):
        trades = [
            create_closed_trade(1, entry_date=BASE_TIME, exit_date=BASE_TIME + timedelta(hours=2)),
            create_closed_trade(1, entry_date=BASE_TIME, exit_date=BASE_TIME + timedelta(hours=4)),
        ]

        assert average_holding_hours(trades) == pytest.approx(3.0)

    def test_risk_reward_skips_zero_risk_and_missing_stop(self):
        trades = [
            create_closed_trade(20, entry_price=100, stop_loss=90),  # 20 / 10
            create_closed_trade(-5, entry_price=100, stop_loss=95),  # 5 / 5
            create_closed_trade(10, entry_price=100, stop_loss=100),
            create_closed_trade(10, entry_price=100),
        ]

        assert average_risk_reward(trades) == pytest.approx(1.5)

    def test_no_stop_losses(self):
        report = compute_report(_sequence([1, 2]))

        assert report.avg_risk_reward_ratio == 0


class TestAggregatorService:
    @pytest.mark.asyncio
    async def test_build_report_from_store(self, repo, platforms):
        created = await platforms.create_platform("user-1", "Bybit", PlatformType.EXCHANGE)
        platform_id = created.platform.platform_id
        for trade in [
            create_closed_trade(10, platform_id=platform_id),
            create_closed_trade(-4, platform_id=platform_id),
            create_closed_trade(99, journal_type=JournalType.STOCK, platform_id=platform_id),
            create_closed_trade(99, owner_id="user-2"),
            create_trade(platform_id=platform_id),
        ]:
            await repo.insert_trade(trade)

        aggregator = AnalyticsAggregator(repo, platforms)
        report = await aggregator.build_report("user-1", JournalType.CRYPTO)

        assert report.total_trades == 2
        assert report.platform_stats[0].key == "Bybit"
        assert report.platform_stats[0].pnl == pytest.approx(6)
