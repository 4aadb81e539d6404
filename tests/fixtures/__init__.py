"""Test fixtures for the trading journal."""

from tests.fixtures.networth import create_transaction
from tests.fixtures.trades import (
    BASE_TIME,
    create_closed_trade,
    create_request,
    create_trade,
)

__all__ = [
    "BASE_TIME",
    "create_closed_trade",
    "create_request",
    "create_trade",
    "create_transaction",
]
