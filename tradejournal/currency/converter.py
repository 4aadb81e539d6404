"""Currency conversion through a USD-based rate table."""

import logging
import time
from dataclasses import dataclass
from typing import Iterable

import httpx

from tradejournal.config import CurrencyConfig
from tradejournal.currency.rates import FALLBACK_RATES, RateCache

logger = logging.getLogger(__name__)


@dataclass
class Money:
    amount: float
    currency: str


@dataclass
class ConvertedAmount:
    original: Money
    converted: Money


@dataclass
class ConversionBatch:
    """Result of converting several amounts into one target currency."""

    items: list[ConvertedAmount]
    total: Money
    rates: dict[str, float]


def convert_with_rates(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: dict[str, float],
) -> float:
    """
    Convert amount via USD using rates quoted as units per 1 USD.

    Currencies missing from rates are treated as rate 1.
    """
    from_currency = from_currency.upper()
    to_currency = to_currency.upper()
    if from_currency == to_currency:
        return amount

    amount_in_usd = amount / (rates.get(from_currency) or 1.0)
    return amount_in_usd * (rates.get(to_currency) or 1.0)


class CurrencyConverter:
    """
    Fetches USD-based exchange rates and converts amounts.

    Rates come from a freecurrencyapi-style endpoint and are cached for
    cache_ttl_seconds. A missing API key, a non-2xx response or a transport
    error falls back to static rates; the fallback is not cached, so the
    next call tries the source again.

    Usage:
        converter = CurrencyConverter(settings.currency)
        idr = await converter.convert(100.0, "USD", "IDR")
        await converter.aclose()
    """

    def __init__(
        self,
        settings: CurrencyConfig,
        cache: RateCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._cache = cache or RateCache(ttl_seconds=settings.cache_ttl_seconds)
        self._client = client
        self._owns_client = client is None
        self._fallback = dict(settings.fallback_rates or FALLBACK_RATES)

    @property
    def cache(self) -> RateCache:
        return self._cache

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout_seconds)
        return self._client

    async def get_rates(self) -> dict[str, float]:
        """Current USD-based rates, from cache, the rate source, or the fallback table."""
        now = time.time()
        if self._cache.is_fresh(now):
            return dict(self._cache.rates)

        if not self._settings.api_key:
            logger.warning("Currency API key not set, using fallback rates")
            return dict(self._fallback)

        quotes = [c.upper() for c in self._settings.quote_currencies]
        params = {
            "apikey": self._settings.api_key,
            "base_currency": self._settings.base_currency.upper(),
            "currencies": ",".join(quotes),
        }

        try:
            response = await self._get_client().get(self._settings.base_url, params=params)
        except httpx.HTTPError as e:
            logger.error("Error fetching exchange rates: %s", e)
            return dict(self._fallback)

        if response.status_code < 200 or response.status_code >= 300:
            logger.error("Failed to fetch exchange rates: HTTP %d", response.status_code)
            return dict(self._fallback)

        try:
            data = response.json().get("data") or {}
        except ValueError as e:
            logger.error("Malformed exchange rate response: %s", e)
            return dict(self._fallback)

        rates = {self._settings.base_currency.upper(): 1.0}
        for code in quotes:
            value = data.get(code)
            if isinstance(value, (int, float)) and value > 0:
                rates[code] = float(value)
            elif code in self._fallback:
                rates[code] = self._fallback[code]

        self._cache.store(rates, now)
        logger.info("Exchange rates refreshed: %s", rates)
        return dict(rates)

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        rates = await self.get_rates()
        return convert_with_rates(amount, from_currency, to_currency, rates)

    async def convert_many(
        self,
        items: Iterable[tuple[float, str]],
        target_currency: str,
    ) -> ConversionBatch:
        """
        Convert (amount, currency) pairs into target_currency.

        Args:
            items: (amount, currency) pairs
            target_currency: Currency for every converted amount and the total

        Returns:
            ConversionBatch with per-item results, their sum and the rates used
        """
        target = target_currency.upper()
        rates = await self.get_rates()

        converted = [
            ConvertedAmount(
                original=Money(amount, currency.upper()),
                converted=Money(convert_with_rates(amount, currency, target, rates), target),
            )
            for amount, currency in items
        ]
        total = sum(item.converted.amount for item in converted)
        return ConversionBatch(items=converted, total=Money(total, target), rates=rates)

    async def aclose(self) -> None:
        """Close the HTTP client if this converter created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
