"""Tests for currency conversion."""

import httpx
import pytest

from tradejournal.config import CurrencyConfig
from tradejournal.currency.converter import CurrencyConverter, convert_with_rates
from tradejournal.currency.rates import FALLBACK_RATES, RateCache

RATES = {"USD": 1.0, "IDR": 16000.0}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _ok_handler(calls: list):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"data": {"IDR": 16000.0}})

    return handler


class TestConvertWithRates:
    def test_same_currency_is_identity(self):
        assert convert_with_rates(42.0, "idr", "IDR", RATES) == 42.0

    def test_converts_through_usd(self):
        assert convert_with_rates(2.0, "USD", "IDR", RATES) == pytest.approx(32000)
        assert convert_with_rates(32000, "IDR", "USD", RATES) == pytest.approx(2.0)

    def test_unknown_currency_uses_rate_one(self):
        assert convert_with_rates(10.0, "XYZ", "IDR", RATES) == pytest.approx(160000)


class TestRateCache:
    def test_empty_cache_is_stale(self):
        assert not RateCache().is_fresh(now=0)

    def test_expiry(self):
        cache = RateCache(ttl_seconds=3600)
        cache.store(RATES, now=1000.0)

        assert cache.is_fresh(now=1000.0 + 3599)
        assert not cache.is_fresh(now=1000.0 + 3600)


class TestCurrencyConverter:
    @pytest.mark.asyncio
    async def test_fetches_and_caches_rates(self):
        calls = []
        client = _client(_ok_handler(calls))
        converter = CurrencyConverter(CurrencyConfig(api_key="secret"), client=client)

        try:
            first = await converter.get_rates()
            second = await converter.get_rates()
        finally:
            await client.aclose()

        assert first == RATES
        assert second == RATES
        assert len(calls) == 1
        params = calls[0].url.params
        assert params["apikey"] == "secret"
        assert params["base_currency"] == "USD"
        assert params["currencies"] == "IDR"

    @pytest.mark.asyncio
    async def test_missing_api_key_uses_fallback(self):
        calls = []
        client = _client(_ok_handler(calls))
        converter = CurrencyConverter(CurrencyConfig(api_key=""), client=client)

        try:
            rates = await converter.get_rates()
        finally:
            await client.aclose()

        assert rates == FALLBACK_RATES
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_uses_fallback_without_caching(self):
        client = _client(lambda request: httpx.Response(503, json={}))
        cache = RateCache()
        converter = CurrencyConverter(CurrencyConfig(api_key="secret"), cache, client)

        try:
            rates = await converter.get_rates()
        finally:
            await client.aclose()

        assert rates == FALLBACK_RATES
        assert not cache.is_fresh()

    @pytest.mark.asyncio
    async def test_transport_error_uses_fallback(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client = _client(handler)
        converter = CurrencyConverter(CurrencyConfig(api_key="secret"), client=client)

        try:
            assert await converter.get_rates() == FALLBACK_RATES
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_missing_quote_falls_back_per_currency(self):
        client = _client(lambda request: httpx.Response(200, json={"data": {}}))
        converter = CurrencyConverter(CurrencyConfig(api_key="secret"), client=client)

        try:
            rates = await converter.get_rates()
        finally:
            await client.aclose()

        assert rates == {"USD": 1.0, "IDR": 15800.0}

    @pytest.mark.asyncio
    async def test_convert_many_totals_in_target(self):
        cache = RateCache()
        cache.store(RATES)
        converter = CurrencyConverter(CurrencyConfig(), cache)

        batch = await converter.convert_many([(10.0, "USD"), (16000.0, "idr")], "usd")

        assert [item.converted.amount for item in batch.items] == pytest.approx([10.0, 1.0])
        assert batch.items[1].original.currency == "IDR"
        assert batch.total.amount == pytest.approx(11.0)
        assert batch.total.currency == "USD"
        await converter.aclose()

    @pytest.mark.asyncio
    async def test_convert_uses_fresh_cache(self):
        cache = RateCache()
        cache.store(RATES)
        converter = CurrencyConverter(CurrencyConfig(api_key="secret"), cache)

        assert await converter.convert(1.0, "USD", "IDR") == pytest.approx(16000)
        await converter.aclose()
