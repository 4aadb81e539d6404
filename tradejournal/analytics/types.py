"""Analytics report structures."""

import math
from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class StreakKind(str, Enum):
    WIN = "win"
    LOSS = "loss"
    NONE = "none"


@dataclass
class CurrencyStats:
    """PnL statistics for trades settled in one currency."""

    trades: int = 0
    wins: int = 0
    losses: int = 0
    total_pnl: float = 0.0
    total_profit: float = 0.0
    total_loss: float = 0.0  # absolute value
    avg_win: float = 0.0
    avg_loss: float = 0.0  # absolute value
    largest_win: float = 0.0
    largest_loss: float = 0.0  # absolute value
    profit_factor: float = 0.0
    expectancy: float = 0.0


@dataclass
class BucketStats:
    """Counts and summed PnL for a trade-type or direction bucket."""

    trades: int = 0
    wins: int = 0
    win_rate: float = 0.0
    pnl: float = 0.0


@dataclass
class Streak:
    kind: StreakKind = StreakKind.NONE
    count: int = 0


@dataclass
class DayPnL:
    """Summed PnL for one calendar day."""

    date: date
    pnl: float
    currency: str


@dataclass
class GroupStats:
    """Per-symbol, per-platform or per-month performance."""

    key: str
    trades: int = 0
    wins: int = 0
    win_rate: float = 0.0
    pnl: float = 0.0
    currency: str = "USD"


@dataclass
class AnalyticsReport:
    """Descriptive performance report over a user's closed trades.

    Percentages are plain floats on a 0-100 scale and are not rounded.
    """

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    win_rate: float = 0.0

    pnl_by_currency: dict[str, CurrencyStats] = field(default_factory=dict)

    spot: BucketStats = field(default_factory=BucketStats)
    futures: BucketStats = field(default_factory=BucketStats)
    long: BucketStats = field(default_factory=BucketStats)
    short: BucketStats = field(default_factory=BucketStats)

    status_breakdown: dict[str, int] = field(default_factory=dict)

    current_streak: Streak = field(default_factory=Streak)
    longest_win_streak: int = 0
    longest_loss_streak: int = 0

    trading_days: int = 0
    avg_trades_per_day: float = 0.0
    best_day: DayPnL | None = None
    worst_day: DayPnL | None = None

    top_symbols: list[GroupStats] = field(default_factory=list)
    platform_stats: list[GroupStats] = field(default_factory=list)
    monthly_stats: list[GroupStats] = field(default_factory=list)

    avg_risk_reward_ratio: float = 0.0
    avg_holding_time_hours: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe dict; infinite values become the string 'Infinity'."""
        return _json_safe(asdict(self))


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value
