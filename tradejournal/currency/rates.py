"""Exchange rate cache."""

import time
from dataclasses import dataclass, field

# Approximate USD-based rates used when the rate source is unavailable
FALLBACK_RATES: dict[str, float] = {"USD": 1.0, "IDR": 15800.0}


@dataclass
class RateCache:
    """USD-based rates with the time they were fetched.

    An empty cache is never fresh.
    """

    ttl_seconds: float = 3600.0
    rates: dict[str, float] = field(default_factory=dict)
    fetched_at: float | None = None

    def is_fresh(self, now: float | None = None) -> bool:
        if not self.rates or self.fetched_at is None:
            return False
        if now is None:
            now = time.time()
        return now - self.fetched_at < self.ttl_seconds

    def store(self, rates: dict[str, float], now: float | None = None) -> None:
        self.rates = dict(rates)
        self.fetched_at = time.time() if now is None else now

    def clear(self) -> None:
        self.rates = {}
        self.fetched_at = None
