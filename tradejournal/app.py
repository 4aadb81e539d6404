"""Application wiring."""

import logging

from tradejournal.analytics.aggregator import AnalyticsAggregator
from tradejournal.config import Settings
from tradejournal.currency.converter import CurrencyConverter
from tradejournal.currency.rates import RateCache
from tradejournal.monitor.logger import setup_logging
from tradejournal.networth.service import NetWorthService
from tradejournal.persistence.database import Database
from tradejournal.persistence.repository import Repository
from tradejournal.platforms.service import PlatformService
from tradejournal.summary.daily import DailyAggregateUpdater
from tradejournal.trades.lifecycle import TradeLifecycleManager

logger = logging.getLogger(__name__)


class Application:
    """Opens the journal store and builds the services on top of it.

    Usage:
        async with Application(settings) as app:
            result = await app.trades.open_trade(owner_id, request)
    """

    def __init__(self, settings: Settings, configure_logging: bool = True) -> None:
        self._settings = settings
        self._configure_logging = configure_logging

        self._db: Database | None = None
        self._repo: Repository | None = None
        self._platforms: PlatformService | None = None
        self._summaries: DailyAggregateUpdater | None = None
        self._trades: TradeLifecycleManager | None = None
        self._analytics: AnalyticsAggregator | None = None
        self._currency: CurrencyConverter | None = None
        self._networth: NetWorthService | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def repository(self) -> Repository:
        return self._require(self._repo)

    @property
    def platforms(self) -> PlatformService:
        return self._require(self._platforms)

    @property
    def summaries(self) -> DailyAggregateUpdater:
        return self._require(self._summaries)

    @property
    def trades(self) -> TradeLifecycleManager:
        return self._require(self._trades)

    @property
    def analytics(self) -> AnalyticsAggregator:
        return self._require(self._analytics)

    @property
    def currency(self) -> CurrencyConverter:
        return self._require(self._currency)

    @property
    def networth(self) -> NetWorthService:
        return self._require(self._networth)

    @staticmethod
    def _require(service):
        if service is None:
            raise RuntimeError("Application not started")
        return service

    async def start(self) -> None:
        """Connect the store and build services."""
        if self._configure_logging:
            setup_logging(
                self._settings.logging.log_dir,
                self._settings.logging.level,
                self._settings.logging.json_format,
            )

        journal = self._settings.journal

        self._db = Database(self._settings.database.path)
        await self._db.connect()
        self._repo = Repository(self._db)

        self._platforms = PlatformService(self._repo, journal.default_currency)
        self._summaries = DailyAggregateUpdater(self._repo, journal.summary_limit)
        self._trades = TradeLifecycleManager(self._repo, self._platforms, self._summaries)
        self._analytics = AnalyticsAggregator(
            self._repo, self._platforms, journal.top_symbols_limit
        )
        self._currency = CurrencyConverter(
            self._settings.currency,
            RateCache(ttl_seconds=self._settings.currency.cache_ttl_seconds),
        )
        self._networth = NetWorthService(self._repo, self._platforms, self._currency)
        logger.debug("Application started")

    async def stop(self) -> None:
        """Release the HTTP client and close the store."""
        if self._currency:
            await self._currency.aclose()
            self._currency = None

        if self._db:
            await self._db.disconnect()
            self._db = None

        self._repo = None
        self._platforms = None
        self._summaries = None
        self._trades = None
        self._analytics = None
        self._networth = None
        logger.debug("Application stopped")

    async def __aenter__(self) -> "Application":
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()
