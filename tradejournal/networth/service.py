"""Deposits, withdrawals and transfers, and the balances they add up to."""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Mapping

from tradejournal.clock import to_local
from tradejournal.currency.converter import CurrencyConverter, convert_with_rates
from tradejournal.errors import JournalError, NotFoundError, ValidationError
from tradejournal.ids import generate_transaction_id
from tradejournal.networth.types import NetWorth, PlatformBalance, Transaction, TransactionType
from tradejournal.platforms.service import UNKNOWN_PLATFORM, PlatformService
from tradejournal.platforms.types import Platform

if TYPE_CHECKING:
    from tradejournal.persistence.repository import Repository

logger = logging.getLogger(__name__)


@dataclass
class NetWorthResult:
    """Result of a transaction or net worth operation."""

    transaction: Transaction | None = None
    transactions: list[Transaction] = field(default_factory=list)
    platform_names: dict[str, str] = field(default_factory=dict)
    net_worth: NetWorth | None = None
    error: JournalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        transaction: Transaction | None = None,
        transactions: list[Transaction] | None = None,
        platform_names: dict[str, str] | None = None,
        net_worth: NetWorth | None = None,
    ) -> "NetWorthResult":
        return cls(
            transaction=transaction,
            transactions=transactions or [],
            platform_names=platform_names or {},
            net_worth=net_worth,
        )

    @classmethod
    def fail(cls, error: JournalError) -> "NetWorthResult":
        return cls(error=error)


def _parse_type(value: str | TransactionType) -> TransactionType | None:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value)
    except ValueError:
        return None


def platform_balances(
    transactions: Iterable[Transaction],
    platforms: Mapping[str, Platform],
    rates: dict[str, float],
) -> list[PlatformBalance]:
    """
    Sum transactions into one balance per platform.

    Each balance is kept in its platform's currency; transaction amounts in
    another currency are converted with rates. A deposit adds to its platform,
    a withdrawal subtracts, and a transfer moves the amount from the source
    platform to the destination. Transactions on a deleted platform still
    count, under 'Unknown' in the currency of the first such transaction.

    Returns:
        Balances in order of each platform's first transaction
    """
    balances: dict[str, PlatformBalance] = {}

    def post(platform_id: str, amount: float, currency: str) -> None:
        if platform_id not in balances:
            platform = platforms.get(platform_id)
            balances[platform_id] = PlatformBalance(
                platform_id=platform_id,
                platform_name=platform.name if platform else UNKNOWN_PLATFORM,
                balance=0.0,
                currency=platform.currency if platform else currency,
            )
        entry = balances[platform_id]
        entry.balance += convert_with_rates(amount, currency, entry.currency, rates)

    for tx in sorted(transactions, key=lambda t: (t.date, t.created_at)):
        post(tx.platform_id, tx.signed_amount, tx.currency)
        if tx.type == TransactionType.TRANSFER and tx.to_platform_id:
            post(tx.to_platform_id, tx.amount, tx.currency)

    return list(balances.values())


class NetWorthService:
    """Owner-scoped balance transactions and the net worth across platforms.

    Balances come only from recorded transactions; trade PnL is not posted
    to platform balances.
    """

    def __init__(
        self,
        repository: "Repository",
        platforms: PlatformService,
        converter: CurrencyConverter,
    ) -> None:
        self._repo = repository
        self._platforms = platforms
        self._converter = converter

    async def add_transaction(
        self,
        owner_id: str,
        type: str | TransactionType,
        platform_id: str,
        amount: float,
        currency: str | None = None,
        date: datetime | None = None,
        to_platform_id: str | None = None,
        description: str | None = None,
    ) -> NetWorthResult:
        """
        Record a deposit, withdrawal or transfer.

        The currency defaults to the source platform's currency and the date
        to now. Transfers need a destination platform other than the source;
        deposits and withdrawals must not name one.
        """
        tx_type = _parse_type(type)
        if tx_type is None:
            return NetWorthResult.fail(
                ValidationError(f"Invalid transaction type: {type}", field="type")
            )
        if (
            not isinstance(amount, (int, float))
            or isinstance(amount, bool)
            or not math.isfinite(amount)
            or amount <= 0
        ):
            return NetWorthResult.fail(
                ValidationError("Amount must be a positive number", field="amount")
            )

        source = await self._platforms.get_platform(owner_id, platform_id)
        if not source.ok:
            return NetWorthResult.fail(source.error)

        if tx_type == TransactionType.TRANSFER:
            if not to_platform_id:
                return NetWorthResult.fail(
                    ValidationError("Transfer needs a destination platform", field="to_platform_id")
                )
            if to_platform_id == platform_id:
                return NetWorthResult.fail(
                    ValidationError(
                        "Cannot transfer to the same platform", field="to_platform_id"
                    )
                )
            destination = await self._platforms.get_platform(owner_id, to_platform_id)
            if not destination.ok:
                return NetWorthResult.fail(destination.error)
        elif to_platform_id:
            return NetWorthResult.fail(
                ValidationError(
                    f"Only transfers take a destination platform, not {tx_type.value}",
                    field="to_platform_id",
                )
            )

        transaction = Transaction(
            transaction_id=generate_transaction_id(),
            owner_id=owner_id,
            type=tx_type,
            platform_id=platform_id,
            to_platform_id=to_platform_id if tx_type == TransactionType.TRANSFER else None,
            amount=float(amount),
            currency=(currency or source.platform.currency).upper(),
            description=description.strip() if description and description.strip() else None,
            date=datetime.now() if date is None else to_local(date),
            created_at=datetime.now(),
        )
        await self._repo.insert_transaction(transaction)

        logger.info(
            "Transaction recorded: %s",
            transaction.transaction_id,
            extra={
                "extra_data": {
                    "transaction_id": transaction.transaction_id,
                    "type": transaction.type.value,
                    "platform_id": transaction.platform_id,
                    "amount": transaction.amount,
                    "currency": transaction.currency,
                }
            },
        )
        return NetWorthResult.success(transaction=transaction)

    async def list_transactions(self, owner_id: str) -> NetWorthResult:
        """Owner's transactions, newest first, with platform display names."""
        transactions = await self._repo.get_transactions(owner_id)
        names = await self._platforms.platform_names(owner_id)
        return NetWorthResult.success(transactions=transactions, platform_names=names)

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> NetWorthResult:
        deleted = await self._repo.delete_transaction(owner_id, transaction_id)
        if not deleted:
            return NetWorthResult.fail(
                NotFoundError(
                    f"Transaction not found: {transaction_id}", resource_id=transaction_id
                )
            )
        logger.info(
            "Transaction deleted: %s",
            transaction_id,
            extra={"extra_data": {"transaction_id": transaction_id}},
        )
        return NetWorthResult.success()

    async def net_worth(self, owner_id: str) -> NetWorthResult:
        """
        Per-platform balances and their totals in USD and IDR.

        Returns:
            NetWorthResult with net_worth set; rates are the table used
        """
        transactions = await self._repo.get_transactions(owner_id)
        listing = await self._platforms.list_platforms(owner_id)
        platforms = {p.platform_id: p for p in listing.platforms}

        rates = await self._converter.get_rates()
        balances = platform_balances(transactions, platforms, rates)

        items = [(b.balance, b.currency) for b in balances]
        usd = await self._converter.convert_many(items, "USD")
        idr = await self._converter.convert_many(items, "IDR")

        logger.debug(
            "Net worth for %s: %d platforms, %.2f USD",
            owner_id,
            len(balances),
            usd.total.amount,
        )
        return NetWorthResult.success(
            net_worth=NetWorth(
                total_usd=usd.total.amount,
                total_idr=idr.total.amount,
                balances=balances,
                rates=usd.rates,
            )
        )
