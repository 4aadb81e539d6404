"""Platform balances and net worth."""

from tradejournal.networth.service import NetWorthResult, NetWorthService, platform_balances
from tradejournal.networth.types import NetWorth, PlatformBalance, Transaction, TransactionType

__all__ = [
    "NetWorth",
    "NetWorthResult",
    "NetWorthService",
    "PlatformBalance",
    "Transaction",
    "TransactionType",
    "platform_balances",
]
