"""Currency conversion."""

from tradejournal.currency.converter import (
    ConversionBatch,
    ConvertedAmount,
    CurrencyConverter,
    Money,
    convert_with_rates,
)
from tradejournal.currency.rates import FALLBACK_RATES, RateCache

__all__ = [
    "ConversionBatch",
    "ConvertedAmount",
    "CurrencyConverter",
    "FALLBACK_RATES",
    "Money",
    "RateCache",
    "convert_with_rates",
]
