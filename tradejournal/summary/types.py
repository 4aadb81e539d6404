"""Daily summary record for the calendar view."""

from dataclasses import dataclass, field
from datetime import datetime

from tradejournal.trades.types import JournalType


@dataclass
class DailySummary:
    """Aggregated PnL for one (owner, calendar day, journal type)."""

    owner_id: str
    date: datetime  # local midnight
    journal_type: JournalType
    total_pnl: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_profitable(self) -> bool:
        return self.total_pnl > 0
