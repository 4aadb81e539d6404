"""Trading platforms and platform lookup."""

from tradejournal.platforms.service import UNKNOWN_PLATFORM, PlatformResult, PlatformService
from tradejournal.platforms.types import Platform, PlatformType

__all__ = [
    "Platform",
    "PlatformResult",
    "PlatformService",
    "PlatformType",
    "UNKNOWN_PLATFORM",
]
