"""Tests for platform registration and lookup."""

import pytest

from tradejournal.errors import NotFoundError, ValidationError
from tradejournal.platforms.service import PlatformService
from tradejournal.platforms.types import PlatformType


class TestCreatePlatform:
    @pytest.mark.asyncio
    async def test_create_with_default_currency(self, platforms):
        result = await platforms.create_platform("user-1", " Binance ", "exchange")

        assert result.ok
        assert result.platform.name == "Binance"
        assert result.platform.type == PlatformType.EXCHANGE
        assert result.platform.currency == "USD"
        assert result.platform.platform_id.startswith("PLT-")

    @pytest.mark.asyncio
    async def test_configured_default_currency(self, repo):
        service = PlatformService(repo, default_currency="IDR")

        result = await service.create_platform("user-1", "Ajaib", PlatformType.BROKER)

        assert result.platform.currency == "IDR"

    @pytest.mark.asyncio
    async def test_missing_name(self, platforms):
        result = await platforms.create_platform("user-1", "", "wallet")

        assert isinstance(result.error, ValidationError)
        assert result.error.field == "name"

    @pytest.mark.asyncio
    async def test_invalid_type(self, platforms):
        result = await platforms.create_platform("user-1", "Vault", "bank")

        assert isinstance(result.error, ValidationError)
        assert result.error.field == "type"


class TestLookup:
    @pytest.mark.asyncio
    async def test_lookup_is_owner_scoped(self, platforms):
        created = await platforms.create_platform("alice", "Kraken", "exchange")
        platform_id = created.platform.platform_id

        assert (await platforms.get_platform("alice", platform_id)).ok
        result = await platforms.get_platform("bob", platform_id)
        assert isinstance(result.error, NotFoundError)

    @pytest.mark.asyncio
    async def test_platform_names(self, platforms):
        a = await platforms.create_platform("user-1", "Kraken", "exchange")
        b = await platforms.create_platform("user-1", "Ledger", "wallet")
        await platforms.create_platform("user-2", "Other", "broker")

        names = await platforms.platform_names("user-1")

        assert names == {
            a.platform.platform_id: "Kraken",
            b.platform.platform_id: "Ledger",
        }

    @pytest.mark.asyncio
    async def test_list_platforms(self, platforms):
        await platforms.create_platform("user-1", "Kraken", "exchange")
        await platforms.create_platform("user-1", "Ledger", "wallet")

        result = await platforms.list_platforms("user-1")

        assert {p.name for p in result.platforms} == {"Kraken", "Ledger"}


class TestUpdateDelete:
    @pytest.mark.asyncio
    async def test_update_changes_only_given_fields(self, platforms):
        created = await platforms.create_platform("user-1", "Kraken", "exchange", "USD")
        platform_id = created.platform.platform_id

        await platforms.update_platform("user-1", platform_id, currency="eur")

        stored = (await platforms.get_platform("user-1", platform_id)).platform
        assert stored.name == "Kraken"
        assert stored.type == PlatformType.EXCHANGE
        assert stored.currency == "EUR"

    @pytest.mark.asyncio
    async def test_update_rejects_bad_type(self, platforms):
        created = await platforms.create_platform("user-1", "Kraken", "exchange")

        result = await platforms.update_platform(
            "user-1", created.platform.platform_id, type="casino"
        )

        assert isinstance(result.error, ValidationError)

    @pytest.mark.asyncio
    async def test_delete(self, platforms):
        created = await platforms.create_platform("user-1", "Kraken", "exchange")
        platform_id = created.platform.platform_id

        assert (await platforms.delete_platform("user-1", platform_id)).ok
        result = await platforms.delete_platform("user-1", platform_id)
        assert isinstance(result.error, NotFoundError)
