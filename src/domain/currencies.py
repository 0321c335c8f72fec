from __future__ import annotations

from typing import NamedTuple


class Currency(NamedTuple):
    name: str
    code: str


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    Currency("US Dollar", "USD"),
    Currency("Euro", "EUR"),
    Currency("British Pound", "GBP"),
    Currency("Japanese Yen", "JPY"),
    Currency("Canadian Dollar", "CAD"),
    Currency("Australian Dollar", "AUD"),
    Currency("Swiss Franc", "CHF"),
    Currency("Chinese Yuan", "CNY"),
    Currency("Nigeria Naira", "NGN"),
)


def find_currency(value: str, currencies: tuple[Currency, ...] = SUPPORTED_CURRENCIES) -> Currency | None:
    """Match a user answer against the option list.

    Accepts either the currency code (any case) or its 1-based position in ``currencies``.
    """
    answer = value.strip()
    if answer.isdigit():
        index = int(answer)
        if 1 <= index <= len(currencies):
            return currencies[index - 1]
        return None
    code = answer.upper()
    for currency in currencies:
        if currency.code == code:
            return currency
    return None


__all__ = ["Currency", "SUPPORTED_CURRENCIES", "find_currency"]
