"""Data access layer for journal entities."""

import json
import logging
from datetime import datetime

import aiosqlite

from tradejournal.networth.types import Transaction, TransactionType
from tradejournal.persistence.database import Database
from tradejournal.platforms.types import Platform, PlatformType
from tradejournal.summary.types import DailySummary
from tradejournal.trades.types import (
    Direction,
    JournalType,
    Trade,
    TradeStatus,
    TradeType,
)

logger = logging.getLogger(__name__)

# Columns a trade list may be sorted by
TRADE_SORT_COLUMNS = frozenset(
    {"entry_date", "exit_date", "created_at", "pnl", "symbol"}
)

_TRADE_COLUMNS = (
    "trade_id",
    "owner_id",
    "platform_id",
    "journal_type",
    "trade_type",
    "direction",
    "currency",
    "symbol",
    "entry_price",
    "size",
    "leverage",
    "fee",
    "tp1",
    "tp2",
    "tp3",
    "tp4",
    "tp5",
    "stop_loss",
    "status",
    "exit_price",
    "pnl",
    "pnl_percentage",
    "entry_date",
    "exit_date",
    "notes",
    "tags",
    "created_at",
    "updated_at",
)


def _ts(value: datetime | None) -> float | None:
    return value.timestamp() if value is not None else None


def _dt(value: float | None) -> datetime | None:
    return datetime.fromtimestamp(value) if value is not None else None


def _trade_to_params(trade: Trade) -> tuple:
    return (
        trade.trade_id,
        trade.owner_id,
        trade.platform_id,
        trade.journal_type.value,
        trade.trade_type.value,
        trade.direction.value,
        trade.currency,
        trade.symbol,
        trade.entry_price,
        trade.size,
        trade.leverage,
        trade.fee,
        trade.tp1,
        trade.tp2,
        trade.tp3,
        trade.tp4,
        trade.tp5,
        trade.stop_loss,
        trade.status.value,
        trade.exit_price,
        trade.pnl,
        trade.pnl_percentage,
        _ts(trade.entry_date),
        _ts(trade.exit_date),
        trade.notes,
        json.dumps(trade.tags) if trade.tags else None,
        _ts(trade.created_at),
        _ts(trade.updated_at),
    )


def _row_to_trade(row: aiosqlite.Row) -> Trade:
    return Trade(
        trade_id=row["trade_id"],
        owner_id=row["owner_id"],
        platform_id=row["platform_id"],
        journal_type=JournalType(row["journal_type"]),
        trade_type=TradeType(row["trade_type"]),
        direction=Direction(row["direction"]),
        currency=row["currency"],
        symbol=row["symbol"],
        entry_price=row["entry_price"],
        size=row["size"],
        leverage=row["leverage"],
        fee=row["fee"] or 0.0,
        tp1=row["tp1"],
        tp2=row["tp2"],
        tp3=row["tp3"],
        tp4=row["tp4"],
        tp5=row["tp5"],
        stop_loss=row["stop_loss"],
        status=TradeStatus(row["status"]),
        exit_price=row["exit_price"],
        pnl=row["pnl"],
        pnl_percentage=row["pnl_percentage"],
        entry_date=_dt(row["entry_date"]),
        exit_date=_dt(row["exit_date"]),
        notes=row["notes"],
        tags=json.loads(row["tags"]) if row["tags"] else [],
        created_at=_dt(row["created_at"]),
        updated_at=_dt(row["updated_at"]),
    )


def _row_to_platform(row: aiosqlite.Row) -> Platform:
    return Platform(
        platform_id=row["platform_id"],
        owner_id=row["owner_id"],
        name=row["name"],
        type=PlatformType(row["type"]),
        currency=row["currency"],
        created_at=_dt(row["created_at"]),
    )


def _row_to_transaction(row: aiosqlite.Row) -> Transaction:
    return Transaction(
        transaction_id=row["transaction_id"],
        owner_id=row["owner_id"],
        type=TransactionType(row["type"]),
        platform_id=row["platform_id"],
        to_platform_id=row["to_platform_id"],
        amount=row["amount"],
        currency=row["currency"],
        description=row["description"],
        date=_dt(row["date"]),
        created_at=_dt(row["created_at"]),
    )


def _row_to_summary(row: aiosqlite.Row) -> DailySummary:
    return DailySummary(
        owner_id=row["owner_id"],
        date=_dt(row["day"]),
        journal_type=JournalType(row["journal_type"]),
        total_pnl=row["total_pnl"],
        total_trades=row["total_trades"],
        winning_trades=row["winning_trades"],
        losing_trades=row["losing_trades"],
        updated_at=_dt(row["updated_at"]),
    )


class Repository:
    """Data access layer for trades, platforms, daily summaries and transactions.

    Every read and write is scoped by owner_id.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    # --- Trade operations ---

    async def insert_trade(self, trade: Trade) -> None:
        """Save a new trade."""
        placeholders = ", ".join("?" for _ in _TRADE_COLUMNS)
        await self._db.write(
            f"INSERT INTO trades ({', '.join(_TRADE_COLUMNS)}) VALUES ({placeholders})",
            _trade_to_params(trade),
        )

    async def get_trade(self, owner_id: str, trade_id: str) -> Trade | None:
        """Get a trade by ID, only if it belongs to owner_id."""
        row = await self._db.fetchone(
            "SELECT * FROM trades WHERE trade_id = ? AND owner_id = ?",
            (trade_id, owner_id),
        )
        return _row_to_trade(row) if row else None

    async def find_trades(
        self,
        owner_id: str,
        journal_type: JournalType | None = None,
        trade_type: TradeType | None = None,
        status: TradeStatus | None = None,
        sort_by: str = "entry_date",
        descending: bool = True,
    ) -> list[Trade]:
        """Get an owner's trades matching the given filters."""
        if sort_by not in TRADE_SORT_COLUMNS:
            raise ValueError(
                f"Cannot sort trades by '{sort_by}'. "
                f"Allowed: {sorted(TRADE_SORT_COLUMNS)}"
            )

        clauses = ["owner_id = ?"]
        params: list = [owner_id]
        if journal_type is not None:
            clauses.append("journal_type = ?")
            params.append(journal_type.value)
        if trade_type is not None:
            clauses.append("trade_type = ?")
            params.append(trade_type.value)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)

        order = "DESC" if descending else "ASC"
        rows = await self._db.fetchall(
            f"""
            SELECT * FROM trades
            WHERE {' AND '.join(clauses)}
            ORDER BY {sort_by} {order}, trade_id {order}
            """,
            tuple(params),
        )
        return [_row_to_trade(row) for row in rows]

    async def get_trades_exited_between(
        self,
        owner_id: str,
        journal_type: JournalType,
        start: datetime,
        end: datetime,
    ) -> list[Trade]:
        """Get trades with a recorded PnL whose exit falls in [start, end]."""
        rows = await self._db.fetchall(
            """
            SELECT * FROM trades
            WHERE owner_id = ? AND journal_type = ?
              AND exit_date >= ? AND exit_date <= ?
              AND pnl IS NOT NULL
            ORDER BY exit_date ASC
            """,
            (owner_id, journal_type.value, start.timestamp(), end.timestamp()),
        )
        return [_row_to_trade(row) for row in rows]

    async def close_trade(self, trade: Trade) -> bool:
        """
        Persist exit fields, guarded on the stored status still being running.

        Returns:
            True if this call closed the trade, False if it was already closed
            (or no longer exists) by the time the write ran
        """
        rowcount = await self._db.write(
            """
            UPDATE trades SET
                exit_price = ?,
                exit_date = ?,
                pnl = ?,
                pnl_percentage = ?,
                status = ?,
                updated_at = ?
            WHERE trade_id = ? AND owner_id = ? AND status = ?
            """,
            (
                trade.exit_price,
                _ts(trade.exit_date),
                trade.pnl,
                trade.pnl_percentage,
                trade.status.value,
                _ts(trade.updated_at),
                trade.trade_id,
                trade.owner_id,
                TradeStatus.RUNNING.value,
            ),
        )
        return rowcount == 1

    async def update_trade_details(self, trade: Trade) -> bool:
        """Update freeform fields (notes, tags) of a trade."""
        rowcount = await self._db.write(
            """
            UPDATE trades SET notes = ?, tags = ?, updated_at = ?
            WHERE trade_id = ? AND owner_id = ?
            """,
            (
                trade.notes,
                json.dumps(trade.tags) if trade.tags else None,
                _ts(trade.updated_at),
                trade.trade_id,
                trade.owner_id,
            ),
        )
        return rowcount == 1

    async def delete_trade(self, owner_id: str, trade_id: str) -> bool:
        """Delete a trade."""
        rowcount = await self._db.write(
            "DELETE FROM trades WHERE trade_id = ? AND owner_id = ?",
            (trade_id, owner_id),
        )
        return rowcount == 1

    # --- Daily summary operations ---

    async def upsert_daily_summary(self, summary: DailySummary) -> None:
        """Insert or fully replace the summary for (owner, day, journal type)."""
        await self._db.write(
            """
            INSERT INTO daily_summaries
            (owner_id, day, journal_type, total_pnl, total_trades,
             winning_trades, losing_trades, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(owner_id, day, journal_type) DO UPDATE SET
                total_pnl = excluded.total_pnl,
                total_trades = excluded.total_trades,
                winning_trades = excluded.winning_trades,
                losing_trades = excluded.losing_trades,
                updated_at = excluded.updated_at
            """,
            (
                summary.owner_id,
                summary.date.timestamp(),
                summary.journal_type.value,
                summary.total_pnl,
                summary.total_trades,
                summary.winning_trades,
                summary.losing_trades,
                summary.updated_at.timestamp(),
            ),
        )

    async def get_daily_summary(
        self, owner_id: str, day: datetime, journal_type: JournalType
    ) -> DailySummary | None:
        """Get the summary for a day (day must be local midnight)."""
        row = await self._db.fetchone(
            """
            SELECT * FROM daily_summaries
            WHERE owner_id = ? AND day = ? AND journal_type = ?
            """,
            (owner_id, day.timestamp(), journal_type.value),
        )
        return _row_to_summary(row) if row else None

    async def get_daily_summaries(
        self, owner_id: str, journal_type: JournalType, limit: int = 90
    ) -> list[DailySummary]:
        """Get the most recent daily summaries, newest first."""
        rows = await self._db.fetchall(
            """
            SELECT * FROM daily_summaries
            WHERE owner_id = ? AND journal_type = ?
            ORDER BY day DESC LIMIT ?
            """,
            (owner_id, journal_type.value, limit),
        )
        return [_row_to_summary(row) for row in rows]

    # --- Platform operations ---

    async def insert_platform(self, platform: Platform) -> None:
        """Save a new platform."""
        await self._db.write(
            """
            INSERT INTO platforms
            (platform_id, owner_id, name, type, currency, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                platform.platform_id,
                platform.owner_id,
                platform.name,
                platform.type.value,
                platform.currency,
                platform.created_at.timestamp(),
            ),
        )

    async def get_platform(self, owner_id: str, platform_id: str) -> Platform | None:
        """Get a platform by ID, only if it belongs to owner_id."""
        row = await self._db.fetchone(
            "SELECT * FROM platforms WHERE platform_id = ? AND owner_id = ?",
            (platform_id, owner_id),
        )
        return _row_to_platform(row) if row else None

    async def get_platforms(self, owner_id: str) -> list[Platform]:
        """Get all of an owner's platforms, newest first."""
        rows = await self._db.fetchall(
            """
            SELECT * FROM platforms WHERE owner_id = ?
            ORDER BY created_at DESC, platform_id DESC
            """,
            (owner_id,),
        )
        return [_row_to_platform(row) for row in rows]

    async def update_platform(self, platform: Platform) -> bool:
        """Update a platform's name, type and currency."""
        rowcount = await self._db.write(
            """
            UPDATE platforms SET name = ?, type = ?, currency = ?
            WHERE platform_id = ? AND owner_id = ?
            """,
            (
                platform.name,
                platform.type.value,
                platform.currency,
                platform.platform_id,
                platform.owner_id,
            ),
        )
        return rowcount == 1

    async def delete_platform(self, owner_id: str, platform_id: str) -> bool:
        """Delete a platform."""
        rowcount = await self._db.write(
            "DELETE FROM platforms WHERE platform_id = ? AND owner_id = ?",
            (platform_id, owner_id),
        )
        return rowcount == 1

    # --- Transaction operations ---

    async def insert_transaction(self, transaction: Transaction) -> None:
        """Save a new balance transaction."""
        await self._db.write(
            """
            INSERT INTO transactions
            (transaction_id, owner_id, type, platform_id, to_platform_id,
             amount, currency, description, date, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction.transaction_id,
                transaction.owner_id,
                transaction.type.value,
                transaction.platform_id,
                transaction.to_platform_id,
                transaction.amount,
                transaction.currency,
                transaction.description,
                transaction.date.timestamp(),
                transaction.created_at.timestamp(),
            ),
        )

    async def get_transactions(self, owner_id: str) -> list[Transaction]:
        """Get all of an owner's transactions, newest date first."""
        rows = await self._db.fetchall(
            """
            SELECT * FROM transactions WHERE owner_id = ?
            ORDER BY date DESC, created_at DESC, transaction_id DESC
            """,
            (owner_id,),
        )
        return [_row_to_transaction(row) for row in rows]

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> bool:
        """Delete a transaction."""
        rowcount = await self._db.write(
            "DELETE FROM transactions WHERE transaction_id = ? AND owner_id = ?",
            (transaction_id, owner_id),
        )
        return rowcount == 1
