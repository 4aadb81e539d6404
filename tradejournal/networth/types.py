"""Balance transactions and net worth snapshots."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TransactionType(str, Enum):
    """Kind of money movement on a platform."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"


@dataclass
class Transaction:
    """
    A deposit into, withdrawal from, or transfer between platforms.

    amount is always positive and in currency; the type decides the sign.
    to_platform_id is set only for transfers.
    """

    transaction_id: str
    owner_id: str
    type: TransactionType
    platform_id: str
    amount: float
    currency: str
    date: datetime
    to_platform_id: str | None = None
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def signed_amount(self) -> float:
        """Amount as seen from the source platform."""
        if self.type == TransactionType.DEPOSIT:
            return self.amount
        return -self.amount


@dataclass
class PlatformBalance:
    """Running balance of one platform in that platform's currency."""

    platform_id: str
    platform_name: str
    balance: float
    currency: str


@dataclass
class NetWorth:
    """All platform balances plus their totals in USD and IDR."""

    total_usd: float
    total_idr: float
    balances: list[PlatformBalance] = field(default_factory=list)
    rates: dict[str, float] = field(default_factory=dict)
