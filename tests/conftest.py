"""Shared fixtures: a fresh SQLite journal store per test."""

import pytest_asyncio

from tradejournal.config import CurrencyConfig
from tradejournal.currency.converter import CurrencyConverter
from tradejournal.networth.service import NetWorthService
from tradejournal.persistence.database import Database
from tradejournal.persistence.repository import Repository
from tradejournal.platforms.service import PlatformService
from tradejournal.summary.daily import DailyAggregateUpdater
from tradejournal.trades.lifecycle import TradeLifecycleManager


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(tmp_path / "journal.db")
    await database.connect()
    yield database
    await database.disconnect()


@pytest_asyncio.fixture
async def repo(db):
    return Repository(db)


@pytest_asyncio.fixture
async def platforms(repo):
    return PlatformService(repo)


@pytest_asyncio.fixture
async def summaries(repo):
    return DailyAggregateUpdater(repo)


@pytest_asyncio.fixture
async def manager(repo, platforms, summaries):
    return TradeLifecycleManager(repo, platforms, summaries)


@pytest_asyncio.fixture
async def converter():
    """Converter on the static fallback table (no API key, no network)."""
    currency = CurrencyConverter(CurrencyConfig(api_key=""))
    yield currency
    await currency.aclose()


@pytest_asyncio.fixture
async def networth(repo, platforms, converter):
    return NetWorthService(repo, platforms, converter)
