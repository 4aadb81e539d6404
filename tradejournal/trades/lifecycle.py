"""Trade lifecycle: open, close, and owner-scoped maintenance."""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING

from tradejournal.clock import to_local
from tradejournal.errors import (
    InvalidStateError,
    JournalError,
    NotFoundError,
    ValidationError,
)
from tradejournal.ids import generate_trade_id
from tradejournal.monitor.logger import get_trade_logger
from tradejournal.trades.classifier import classify_exit
from tradejournal.trades.pnl import calculate_pnl
from tradejournal.trades.types import (
    Direction,
    JournalType,
    OpenTradeRequest,
    Trade,
    TradeStatus,
    TradeType,
)

if TYPE_CHECKING:
    from tradejournal.persistence.repository import Repository
    from tradejournal.platforms.service import PlatformService
    from tradejournal.summary.daily import DailyAggregateUpdater
    from tradejournal.summary.types import DailySummary

logger = logging.getLogger(__name__)
trade_logger = get_trade_logger()


@dataclass
class TradeResult:
    """Result of a lifecycle operation."""

    trade: Trade | None = None
    trades: list[Trade] = field(default_factory=list)
    summary: "DailySummary | None" = None
    error: JournalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        trade: Trade | None = None,
        trades: list[Trade] | None = None,
        summary: "DailySummary | None" = None,
    ) -> "TradeResult":
        return cls(trade=trade, trades=trades or [], summary=summary)

    @classmethod
    def fail(cls, error: JournalError) -> "TradeResult":
        return cls(error=error)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _normalize_tags(tags: list[str]) -> list[str]:
    return sorted({t.strip() for t in tags if t and t.strip()})


def validate_open_request(request: OpenTradeRequest) -> ValidationError | None:
    """Check required Open fields. Returns the first problem found, or None."""
    if not request.platform_id:
        return ValidationError("Platform is required", field="platform_id")
    if not request.symbol or not request.symbol.strip():
        return ValidationError("Symbol is required", field="symbol")
    if not isinstance(request.direction, Direction):
        return ValidationError("Direction must be long or short", field="direction")
    if not isinstance(request.journal_type, JournalType):
        return ValidationError("Journal type must be crypto or stock", field="journal_type")
    if not isinstance(request.trade_type, TradeType):
        return ValidationError("Trade type must be spot or futures", field="trade_type")
    if not isinstance(request.entry_date, datetime):
        return ValidationError("Entry date is required", field="entry_date")
    if not _is_number(request.entry_price) or request.entry_price <= 0:
        return ValidationError("Entry price must be a positive number", field="entry_price")
    if not _is_number(request.size) or request.size <= 0:
        return ValidationError("Size must be a positive number", field="size")
    if not _is_number(request.fee) or request.fee < 0:
        return ValidationError("Fee must be a non-negative number", field="fee")
    if request.leverage is not None:
        if request.trade_type != TradeType.FUTURES:
            return ValidationError("Leverage only applies to futures trades", field="leverage")
        if not _is_number(request.leverage) or request.leverage <= 0:
            return ValidationError("Leverage must be a positive number", field="leverage")
    return None


class TradeLifecycleManager:
    """Opens and closes trades and keeps daily summaries in step with closes.

    State machine: RUNNING -> {STOPLOSS, PROFIT, TP1..TP5}. Closed trades are
    terminal; their status and PnL never change again.
    """

    def __init__(
        self,
        repository: "Repository",
        platforms: "PlatformService",
        aggregator: "DailyAggregateUpdater",
    ) -> None:
        self._repo = repository
        self._platforms = platforms
        self._aggregator = aggregator

    async def open_trade(self, owner_id: str, request: OpenTradeRequest) -> TradeResult:
        """
        Record a new running trade.

        The trade currency defaults to the platform's currency. No PnL is
        computed and no daily summary is touched.
        """
        error = validate_open_request(request)
        if error is not None:
            return TradeResult.fail(error)

        lookup = await self._platforms.get_platform(owner_id, request.platform_id)
        if not lookup.ok:
            return TradeResult.fail(lookup.error)

        now = datetime.now()
        trade = Trade(
            trade_id=generate_trade_id(),
            owner_id=owner_id,
            platform_id=request.platform_id,
            journal_type=request.journal_type,
            trade_type=request.trade_type,
            direction=request.direction,
            currency=(request.currency or lookup.platform.currency).upper(),
            symbol=request.symbol.strip(),
            entry_price=float(request.entry_price),
            size=float(request.size),
            entry_date=to_local(request.entry_date),
            leverage=request.leverage,
            fee=float(request.fee),
            tp1=request.tp1,
            tp2=request.tp2,
            tp3=request.tp3,
            tp4=request.tp4,
            tp5=request.tp5,
            stop_loss=request.stop_loss,
            status=TradeStatus.RUNNING,
            notes=request.notes,
            tags=_normalize_tags(request.tags),
            created_at=now,
            updated_at=now,
        )
        await self._repo.insert_trade(trade)

        trade_logger.info(
            "Trade opened",
            extra={
                "trade_id": trade.trade_id,
                "symbol": trade.symbol,
                "direction": trade.direction.value,
                "status": trade.status.value,
                "price": trade.entry_price,
                "size": trade.size,
            },
        )
        return TradeResult.success(trade=trade)

    async def close_trade(
        self,
        owner_id: str,
        trade_id: str,
        exit_price: float,
        exit_date: datetime | None = None,
    ) -> TradeResult:
        """
        Close a running trade at exit_price.

        exit_price may be 0 (the position went to zero). An aware exit_date is
        converted to local time before it is compared or bucketed by day.

        Computes PnL, classifies the exit, writes the exit fields guarded on
        the stored status still being RUNNING, then recomputes the summary for
        the exit day exactly once.

        Returns:
            TradeResult with the closed trade and the refreshed daily summary
        """
        if not _is_number(exit_price) or exit_price < 0:
            return TradeResult.fail(
                ValidationError("Exit price must be a non-negative number", field="exit_price")
            )

        trade = await self._repo.get_trade(owner_id, trade_id)
        if trade is None:
            return TradeResult.fail(
                NotFoundError(f"Trade not found: {trade_id}", resource_id=trade_id)
            )
        if not trade.is_open:
            return TradeResult.fail(
                InvalidStateError(f"Trade {trade_id} is already closed ({trade.status.value})")
            )

        exit_date = datetime.now() if exit_date is None else to_local(exit_date)
        if exit_date < trade.entry_date:
            return TradeResult.fail(
                ValidationError("Exit date cannot be before entry date", field="exit_date")
            )

        pnl = calculate_pnl(
            trade.entry_price, exit_price, trade.size, trade.direction, trade.fee
        )
        if not pnl.ok:
            return TradeResult.fail(pnl.error)

        status = classify_exit(
            trade.entry_price,
            exit_price,
            trade.direction,
            trade.take_profits,
            trade.stop_loss,
        )
        if not trade.can_transition_to(status):
            return TradeResult.fail(
                InvalidStateError(
                    f"Cannot move trade {trade_id} from {trade.status.value} to {status.value}"
                )
            )

        closed = replace(
            trade,
            status=status,
            exit_price=float(exit_price),
            exit_date=exit_date,
            pnl=pnl.pnl,
            pnl_percentage=pnl.pnl_percentage,
            updated_at=datetime.now(),
        )

        if not await self._repo.close_trade(closed):
            # Another close won the race between our read and write
            return TradeResult.fail(
                InvalidStateError(f"Trade {trade_id} was closed concurrently")
            )

        summary = await self._aggregator.recompute(
            owner_id, exit_date, closed.journal_type
        )

        trade_logger.info(
            "Trade closed",
            extra={
                "trade_id": closed.trade_id,
                "symbol": closed.symbol,
                "direction": closed.direction.value,
                "status": closed.status.value,
                "price": closed.exit_price,
                "pnl": closed.pnl,
            },
        )
        return TradeResult.success(trade=closed, summary=summary)

    async def get_trade(self, owner_id: str, trade_id: str) -> TradeResult:
        trade = await self._repo.get_trade(owner_id, trade_id)
        if trade is None:
            return TradeResult.fail(
                NotFoundError(f"Trade not found: {trade_id}", resource_id=trade_id)
            )
        return TradeResult.success(trade=trade)

    async def list_trades(
        self,
        owner_id: str,
        journal_type: JournalType | None = None,
        trade_type: TradeType | None = None,
        status: TradeStatus | None = None,
    ) -> TradeResult:
        """Owner's trades, newest entry first."""
        trades = await self._repo.find_trades(
            owner_id,
            journal_type=journal_type,
            trade_type=trade_type,
            status=status,
        )
        return TradeResult.success(trades=trades)

    async def update_notes(
        self,
        owner_id: str,
        trade_id: str,
        notes: str | None = None,
        tags: list[str] | None = None,
    ) -> TradeResult:
        """Replace notes and/or tags. Status and PnL are never touched here."""
        trade = await self._repo.get_trade(owner_id, trade_id)
        if trade is None:
            return TradeResult.fail(
                NotFoundError(f"Trade not found: {trade_id}", resource_id=trade_id)
            )

        updated = replace(
            trade,
            notes=notes if notes is not None else trade.notes,
            tags=_normalize_tags(tags) if tags is not None else trade.tags,
            updated_at=datetime.now(),
        )
        await self._repo.update_trade_details(updated)
        return TradeResult.success(trade=updated)

    async def delete_trade(self, owner_id: str, trade_id: str) -> TradeResult:
        """Delete a trade; a closed trade's exit day summary is recomputed without it."""
        trade = await self._repo.get_trade(owner_id, trade_id)
        if trade is None:
            return TradeResult.fail(
                NotFoundError(f"Trade not found: {trade_id}", resource_id=trade_id)
            )

        await self._repo.delete_trade(owner_id, trade_id)
        logger.info(
            "Trade deleted: %s",
            trade_id,
            extra={
                "extra_data": {
                    "trade_id": trade_id,
                    "status": trade.status.value,
                    "journal_type": trade.journal_type.value,
                }
            },
        )

        summary = None
        if trade.exit_date is not None:
            summary = await self._aggregator.recompute(
                owner_id, trade.exit_date, trade.journal_type
            )
        return TradeResult.success(trade=trade, summary=summary)
