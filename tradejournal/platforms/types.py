"""Platform records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PlatformType(str, Enum):
    """Where a platform's balances are held."""

    EXCHANGE = "exchange"
    BROKER = "broker"
    WALLET = "wallet"


@dataclass
class Platform:
    """A trading venue registered by a user."""

    platform_id: str
    owner_id: str
    name: str
    type: PlatformType
    currency: str = "USD"
    created_at: datetime = field(default_factory=datetime.now)
