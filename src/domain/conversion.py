from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, field_validator

from .rates import RateTable

INVALID_AMOUNT_MESSAGE = "Please enter a valid number"


class InvalidAmountError(ValueError):
    def __init__(self, raw: str) -> None:
        super().__init__(INVALID_AMOUNT_MESSAGE)
        self.raw = raw


def parse_amount(raw: str) -> Decimal:
    """Parse a user-typed amount as a finite decimal number, sign included.

    Surrounding whitespace and digit separators are rejected; so are values
    that overflow a double.
    """
    if raw != raw.strip() or "_" in raw:
        raise InvalidAmountError(raw)
    try:
        as_float = float(raw)
    except ValueError as exc:
        raise InvalidAmountError(raw) from exc
    if not math.isfinite(as_float):
        raise InvalidAmountError(raw)
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise InvalidAmountError(raw) from exc


class ConversionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    amount: Decimal

    @field_validator("source", "target")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("currency code must be non-empty")
        return code

    @property
    def is_same_currency(self) -> bool:
        return self.source == self.target


class ConversionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    request: ConversionRequest
    converted: Decimal
    # Target units per one source unit; None for the same-currency shortcut.
    rate: Decimal | None = None

    @property
    def is_same_currency(self) -> bool:
        return self.rate is None


def convert_same_currency(request: ConversionRequest) -> ConversionResult:
    return ConversionResult(request=request, converted=request.amount)


def convert(request: ConversionRequest, table: RateTable) -> ConversionResult:
    """Cross-convert through the table's base currency.

    Raises ``CurrencyNotFoundError`` when either code is missing from ``table``.
    """
    if request.is_same_currency:
        return convert_same_currency(request)

    rate_from = table.rate_for(request.source)
    rate_to = table.rate_for(request.target)
    rate = rate_to / rate_from
    return ConversionResult(request=request, converted=request.amount * rate, rate=rate)


__all__ = [
    "INVALID_AMOUNT_MESSAGE",
    "ConversionRequest",
    "ConversionResult",
    "InvalidAmountError",
    "convert",
    "convert_same_currency",
    "parse_amount",
]
