"""Platform registry and lookup."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from tradejournal.errors import JournalError, NotFoundError, ValidationError
from tradejournal.ids import generate_platform_id
from tradejournal.platforms.types import Platform, PlatformType

if TYPE_CHECKING:
    from tradejournal.persistence.repository import Repository

logger = logging.getLogger(__name__)

UNKNOWN_PLATFORM = "Unknown"


@dataclass
class PlatformResult:
    """Result of a platform operation."""

    platform: Platform | None = None
    platforms: list[Platform] = field(default_factory=list)
    error: JournalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        platform: Platform | None = None,
        platforms: list[Platform] | None = None,
    ) -> "PlatformResult":
        return cls(platform=platform, platforms=platforms or [])

    @classmethod
    def fail(cls, error: JournalError) -> "PlatformResult":
        return cls(error=error)


def _parse_type(value: str | PlatformType | None) -> PlatformType | None:
    if isinstance(value, PlatformType):
        return value
    try:
        return PlatformType(value)
    except ValueError:
        return None


class PlatformService:
    """Owner-scoped platform CRUD plus name/currency lookup for trades and analytics."""

    def __init__(self, repository: "Repository", default_currency: str = "USD") -> None:
        self._repo = repository
        self._default_currency = default_currency

    async def create_platform(
        self,
        owner_id: str,
        name: str,
        type: str | PlatformType,
        currency: str | None = None,
    ) -> PlatformResult:
        """Register a new platform for owner_id."""
        if not name or not name.strip():
            return PlatformResult.fail(ValidationError("Platform name is required", field="name"))

        platform_type = _parse_type(type)
        if platform_type is None:
            return PlatformResult.fail(
                ValidationError(f"Invalid platform type: {type}", field="type")
            )

        platform = Platform(
            platform_id=generate_platform_id(),
            owner_id=owner_id,
            name=name.strip(),
            type=platform_type,
            currency=(currency or self._default_currency).upper(),
            created_at=datetime.now(),
        )
        await self._repo.insert_platform(platform)
        logger.info(
            "Platform created: %s",
            platform.name,
            extra={
                "extra_data": {
                    "platform_id": platform.platform_id,
                    "type": platform.type.value,
                    "currency": platform.currency,
                }
            },
        )
        return PlatformResult.success(platform=platform)

    async def get_platform(self, owner_id: str, platform_id: str) -> PlatformResult:
        """Look up one of owner_id's platforms."""
        platform = await self._repo.get_platform(owner_id, platform_id)
        if platform is None:
            return PlatformResult.fail(
                NotFoundError(f"Platform not found: {platform_id}", resource_id=platform_id)
            )
        return PlatformResult.success(platform=platform)

    async def list_platforms(self, owner_id: str) -> PlatformResult:
        """All of owner_id's platforms, newest first."""
        platforms = await self._repo.get_platforms(owner_id)
        return PlatformResult.success(platforms=platforms)

    async def update_platform(
        self,
        owner_id: str,
        platform_id: str,
        name: str | None = None,
        type: str | PlatformType | None = None,
        currency: str | None = None,
    ) -> PlatformResult:
        """Change any of name, type or currency; omitted fields are kept."""
        platform = await self._repo.get_platform(owner_id, platform_id)
        if platform is None:
            return PlatformResult.fail(
                NotFoundError(f"Platform not found: {platform_id}", resource_id=platform_id)
            )

        if name:
            platform.name = name.strip()
        if type:
            platform_type = _parse_type(type)
            if platform_type is None:
                return PlatformResult.fail(
                    ValidationError(f"Invalid platform type: {type}", field="type")
                )
            platform.type = platform_type
        if currency:
            platform.currency = currency.upper()

        await self._repo.update_platform(platform)
        logger.info(
            "Platform updated: %s",
            platform.name,
            extra={
                "extra_data": {
                    "platform_id": platform.platform_id,
                    "type": platform.type.value,
                    "currency": platform.currency,
                }
            },
        )
        return PlatformResult.success(platform=platform)

    async def delete_platform(self, owner_id: str, platform_id: str) -> PlatformResult:
        """Delete a platform. Its trades are kept and report as 'Unknown'."""
        deleted = await self._repo.delete_platform(owner_id, platform_id)
        if not deleted:
            return PlatformResult.fail(
                NotFoundError(f"Platform not found: {platform_id}", resource_id=platform_id)
            )
        logger.info(
            "Platform deleted: %s", platform_id, extra={"extra_data": {"platform_id": platform_id}}
        )
        return PlatformResult.success()

    async def platform_names(self, owner_id: str) -> dict[str, str]:
        """Map of platform_id -> display name for owner_id."""
        platforms = await self._repo.get_platforms(owner_id)
        return {p.platform_id: p.name for p in platforms}
