"""Trade dataclass and status state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class JournalType(str, Enum):
    """Top-level trading domain partition."""

    CRYPTO = "crypto"
    STOCK = "stock"


class TradeType(str, Enum):
    """Instrument kind."""

    SPOT = "spot"
    FUTURES = "futures"


class Direction(str, Enum):
    """Position direction."""

    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    """Trade lifecycle states."""

    RUNNING = "running"
    TP1 = "tp1"
    TP2 = "tp2"
    TP3 = "tp3"
    TP4 = "tp4"
    TP5 = "tp5"
    PROFIT = "profit"
    STOPLOSS = "stoploss"

    @property
    def is_closed(self) -> bool:
        """Check if this is a terminal (closed) state."""
        return self is not TradeStatus.RUNNING


CLOSED_STATUSES: frozenset[TradeStatus] = frozenset(
    s for s in TradeStatus if s.is_closed
)

# Take-profit tiers, lowest first
TAKE_PROFIT_STATUSES: tuple[TradeStatus, ...] = (
    TradeStatus.TP1,
    TradeStatus.TP2,
    TradeStatus.TP3,
    TradeStatus.TP4,
    TradeStatus.TP5,
)

# Valid state transitions
VALID_TRANSITIONS: dict[TradeStatus, frozenset[TradeStatus]] = {
    status: (CLOSED_STATUSES if status is TradeStatus.RUNNING else frozenset())
    for status in TradeStatus
}


@dataclass
class Trade:
    """One trading position owned by a single user."""

    trade_id: str
    owner_id: str
    platform_id: str
    journal_type: JournalType
    trade_type: TradeType
    direction: Direction
    currency: str
    symbol: str
    entry_price: float
    size: float
    entry_date: datetime
    leverage: float | None = None
    fee: float = 0.0
    tp1: float | None = None
    tp2: float | None = None
    tp3: float | None = None
    tp4: float | None = None
    tp5: float | None = None
    stop_loss: float | None = None
    status: TradeStatus = TradeStatus.RUNNING
    exit_price: float | None = None
    exit_date: datetime | None = None
    pnl: float | None = None
    pnl_percentage: float | None = None
    notes: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_open(self) -> bool:
        """Check if the trade is still running."""
        return self.status is TradeStatus.RUNNING

    @property
    def take_profits(self) -> tuple[float | None, ...]:
        """Take-profit ladder as (tp1, tp2, tp3, tp4, tp5)."""
        return (self.tp1, self.tp2, self.tp3, self.tp4, self.tp5)

    @property
    def activity_date(self) -> datetime:
        """Exit date for closed trades, entry date otherwise."""
        return self.exit_date or self.entry_date

    def has_consistent_exit(self) -> bool:
        """Exit price, exit date, PnL and PnL% are all set iff the trade is closed."""
        exit_fields = (self.exit_price, self.exit_date, self.pnl, self.pnl_percentage)
        if self.is_open:
            return all(v is None for v in exit_fields)
        return all(v is not None for v in exit_fields)

    def can_transition_to(self, new_status: TradeStatus) -> bool:
        """Check if transition to new status is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, frozenset())


@dataclass
class OpenTradeRequest:
    """Inputs for opening a trade."""

    platform_id: str
    symbol: str
    entry_price: float
    size: float
    direction: Direction
    entry_date: datetime
    journal_type: JournalType = JournalType.CRYPTO
    trade_type: TradeType = TradeType.SPOT
    currency: str | None = None
    leverage: float | None = None
    fee: float = 0.0
    tp1: float | None = None
    tp2: float | None = None
    tp3: float | None = None
    tp4: float | None = None
    tp5: float | None = None
    stop_loss: float | None = None
    notes: str | None = None
    tags: list[str] = field(default_factory=list)
