"""Domain types for the currency converter.

Plain in-memory values (dataclasses and Pydantic models) describing the
supported currencies, fetched rate tables and conversion requests. Nothing in
here talks to the network or the terminal.
"""

__all__ = [
    "conversion",
    "currencies",
    "rates",
]
