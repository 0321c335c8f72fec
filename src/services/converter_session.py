from __future__ import annotations

import logging
from enum import IntEnum
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from domain.conversion import ConversionRequest, ConversionResult, convert, convert_same_currency
from domain.rates import CurrencyNotFoundError, RateTable
from utils.formatting import format_amount, format_rate

from .open_exchange_rates_client import OpenExchangeRatesAPIError

logger = logging.getLogger(__name__)

LOOKUP_MISS_MESSAGE = "Error: One or both currencies not found in API response"
FAREWELL_MESSAGE = "Thank you for using the currency converter!"


class ExitCode(IntEnum):
    OK = 0
    CONFIG_ERROR = 2
    FORM_ERROR = 3
    FETCH_ERROR = 4


class FormAbortedError(RuntimeError):
    """The interactive form itself failed, as opposed to a rejected answer."""


class ConversionForm(Protocol):
    def collect_request(self) -> ConversionRequest: ...

    def ask_continue(self) -> bool: ...


class RatesProvider(Protocol):
    def get_latest_rates(self) -> RateTable: ...


class ConverterSession:
    """Prompt, convert and print until the user declines another round.

    A missing currency in the fetched table sends the user back to the form;
    a failed fetch or a broken form ends the session with a non-zero ``ExitCode``.
    """

    def __init__(
        self,
        *,
        form: ConversionForm,
        rates_provider: RatesProvider,
        console: Console | None = None,
    ) -> None:
        self.form = form
        self.rates_provider = rates_provider
        self.console = console or Console()

    def run(self) -> ExitCode:
        while True:
            try:
                request = self.form.collect_request()
            except FormAbortedError as exc:
                self._print_error("Error running form", exc)
                return ExitCode.FORM_ERROR

            try:
                result = self.resolve(request)
            except CurrencyNotFoundError as exc:
                logger.warning("Lookup miss for %s -> %s: %s", request.source, request.target, exc)
                self.console.print(LOOKUP_MISS_MESSAGE)
                continue
            except OpenExchangeRatesAPIError as exc:
                logger.error("Fetching rates failed (status=%s): %s", exc.status_code, exc)
                self._print_error("Error fetching exchange rates", exc)
                return ExitCode.FETCH_ERROR

            self.present(result)

            try:
                again = self.form.ask_continue()
            except FormAbortedError as exc:
                self._print_error("Error running continue form", exc)
                return ExitCode.FORM_ERROR

            self.console.print()
            if not again:
                break

        self.console.print(FAREWELL_MESSAGE)
        return ExitCode.OK

    def resolve(self, request: ConversionRequest) -> ConversionResult:
        if request.is_same_currency:
            return convert_same_currency(request)
        table = self.rates_provider.get_latest_rates()
        return convert(request, table)

    def present(self, result: ConversionResult) -> None:
        request = result.request
        line = (
            f"{format_amount(request.amount)} {request.source} = "
            f"{format_amount(result.converted)} {request.target}"
        )
        self.console.print()
        if result.rate is None:
            self.console.print(f"{line} (same currency)")
            return
        self.console.print(line)
        self.console.print(f"Exchange rate: 1 {request.source} = {format_rate(result.rate)} {request.target}")

    def _print_error(self, prefix: str, exc: Exception) -> None:
        self.console.print(f"{prefix}: {escape(str(exc))}")


__all__ = [
    "ConversionForm",
    "ConverterSession",
    "ExitCode",
    "FormAbortedError",
    "RatesProvider",
]
