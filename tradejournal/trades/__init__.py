"""Trade records, PnL, exit classification and lifecycle."""

from tradejournal.trades.types import (
    Direction,
    JournalType,
    OpenTradeRequest,
    Trade,
    TradeStatus,
    TradeType,
)
from tradejournal.trades.classifier import classify_exit
from tradejournal.trades.pnl import PnLResult, calculate_pnl
from tradejournal.trades.lifecycle import TradeLifecycleManager, TradeResult

__all__ = [
    "Direction",
    "JournalType",
    "OpenTradeRequest",
    "PnLResult",
    "Trade",
    "TradeLifecycleManager",
    "TradeResult",
    "TradeStatus",
    "TradeType",
    "calculate_pnl",
    "classify_exit",
]
