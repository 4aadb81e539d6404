"""Exit outcome classification against the TP/SL ladder."""

from typing import Sequence

from tradejournal.trades.types import TAKE_PROFIT_STATUSES, Direction, TradeStatus


def is_loss(entry_price: float, exit_price: float, direction: Direction) -> bool:
    """Check if the exit moved against the position (equality is not a loss)."""
    if direction == Direction.LONG:
        return exit_price < entry_price
    return exit_price > entry_price


def classify_exit(
    entry_price: float,
    exit_price: float,
    direction: Direction,
    take_profits: Sequence[float | None] = (),
    stop_loss: float | None = None,
) -> TradeStatus:
    """
    Classify a closing price into exactly one outcome.

    Any adverse exit is STOPLOSS, whether or not stop_loss was configured or
    actually reached. Otherwise the highest take-profit tier the exit reached
    wins (tp5 first), and PROFIT when no tier was reached or none is set.

    Args:
        entry_price: Position entry price
        exit_price: Closing price
        direction: LONG or SHORT
        take_profits: (tp1, ..., tp5); missing or None slots are unset
        stop_loss: Configured stop-loss price (informational only)

    Returns:
        The closed TradeStatus
    """
    if is_loss(entry_price, exit_price, direction):
        return TradeStatus.STOPLOSS

    tiers = list(zip(TAKE_PROFIT_STATUSES, take_profits))
    for status, price in reversed(tiers):
        if price is None:
            continue
        if direction == Direction.LONG and exit_price >= price:
            return status
        if direction == Direction.SHORT and exit_price <= price:
            return status

    return TradeStatus.PROFIT
