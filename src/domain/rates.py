from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


class CurrencyNotFoundError(LookupError):
    def __init__(self, currency: str, *, base: str) -> None:
        super().__init__(f"Currency {currency} not available in {base} rate table")
        self.currency = currency
        self.base = base


@dataclass(frozen=True)
class RateTable:
    """Rates of every listed currency relative to ``base``."""

    base: str
    rates: Mapping[str, Decimal]
    timestamp: datetime | None = None

    def rate_for(self, currency: str) -> Decimal:
        code = currency.upper()
        if code == self.base:
            return Decimal("1")
        try:
            return self.rates[code]
        except KeyError as exc:
            raise CurrencyNotFoundError(code, base=self.base) from exc


__all__ = ["CurrencyNotFoundError", "RateTable"]
