"""Realized profit/loss for a single trade."""

from dataclasses import dataclass

from tradejournal.errors import JournalError, TradeArithmeticError, ValidationError
from tradejournal.trades.types import Direction


@dataclass
class PnLResult:
    """Result of a PnL calculation."""

    pnl: float | None = None
    pnl_percentage: float | None = None
    error: JournalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, pnl: float, pnl_percentage: float) -> "PnLResult":
        """Create a computed result."""
        return cls(pnl=pnl, pnl_percentage=pnl_percentage)

    @classmethod
    def fail(cls, error: JournalError) -> "PnLResult":
        """Create a failed result."""
        return cls(error=error)


def calculate_pnl(
    entry_price: float,
    exit_price: float,
    size: float,
    direction: Direction,
    fee: float = 0.0,
) -> PnLResult:
    """
    Compute realized PnL and percentage return.

    pnl is direction aware and net of fee. pnl_percentage is always the
    long-style move (exit - entry) / entry * 100, so for short trades its
    sign is opposite to pnl.

    Returns:
        PnLResult with pnl and pnl_percentage, or the error that prevented it
    """
    if size <= 0:
        return PnLResult.fail(ValidationError("Size must be positive", field="size"))
    if fee < 0:
        return PnLResult.fail(ValidationError("Fee cannot be negative", field="fee"))
    if entry_price == 0:
        return PnLResult.fail(
            TradeArithmeticError(
                "Entry price is zero; percentage return is undefined",
                field="entry_price",
            )
        )

    if direction == Direction.LONG:
        pnl = (exit_price - entry_price) * size - fee
    else:
        pnl = (entry_price - exit_price) * size - fee

    # TODO: make this direction aware once the journal UI agrees on sign
    pnl_percentage = (exit_price - entry_price) / entry_price * 100

    return PnLResult.success(pnl, pnl_percentage)
