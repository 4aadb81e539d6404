"""Trade builders for tests."""

from datetime import datetime, timedelta
from itertools import count

from tradejournal.trades.types import (
    Direction,
    JournalType,
    OpenTradeRequest,
    Trade,
    TradeStatus,
    TradeType,
)

# Fixed local time so day bucketing is deterministic
BASE_TIME = datetime(2024, 3, 15, 10, 0, 0)

_ids = count(1)


def create_trade(
    owner_id: str = "user-1",
    platform_id: str = "PLT-test",
    symbol: str = "BTC",
    entry_price: float = 100.0,
    size: float = 1.0,
    direction: Direction = Direction.LONG,
    trade_type: TradeType = TradeType.SPOT,
    journal_type: JournalType = JournalType.CRYPTO,
    currency: str = "USD",
    entry_date: datetime = BASE_TIME,
    **kwargs,
) -> Trade:
    """Create a running trade. Extra keyword arguments are passed to Trade."""
    return Trade(
        trade_id=kwargs.pop("trade_id", f"TRD-{next(_ids):04d}"),
        owner_id=owner_id,
        platform_id=platform_id,
        journal_type=journal_type,
        trade_type=trade_type,
        direction=direction,
        currency=currency,
        symbol=symbol,
        entry_price=entry_price,
        size=size,
        entry_date=entry_date,
        **kwargs,
    )


def create_closed_trade(
    pnl: float,
    exit_date: datetime = BASE_TIME + timedelta(hours=2),
    status: TradeStatus | None = None,
    exit_price: float | None = None,
    **kwargs,
) -> Trade:
    """Create a closed trade with a given PnL.

    The exit price defaults to one consistent with pnl for a size-1 long.
    """
    entry_price = kwargs.pop("entry_price", 100.0)
    if exit_price is None:
        exit_price = entry_price + pnl
    if status is None:
        status = TradeStatus.PROFIT if pnl >= 0 else TradeStatus.STOPLOSS

    return create_trade(
        entry_price=entry_price,
        exit_price=exit_price,
        exit_date=exit_date,
        pnl=pnl,
        pnl_percentage=(exit_price - entry_price) / entry_price * 100,
        status=status,
        **kwargs,
    )


def create_request(
    platform_id: str,
    symbol: str = "BTC",
    entry_price: float = 100.0,
    size: float = 1.0,
    direction: Direction = Direction.LONG,
    entry_date: datetime = BASE_TIME,
    **kwargs,
) -> OpenTradeRequest:
    """Create an open-trade request."""
    return OpenTradeRequest(
        platform_id=platform_id,
        symbol=symbol,
        entry_price=entry_price,
        size=size,
        direction=direction,
        entry_date=entry_date,
        **kwargs,
    )
