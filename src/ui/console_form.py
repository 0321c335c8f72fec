"""Terminal form for collecting one conversion request.

Built on rich prompts. Invalid answers are re-asked in place; only a broken
input stream (EOF, Ctrl-C) escapes, as ``FormAbortedError``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TextIO

from rich import box
from rich.console import Console
from rich.prompt import Confirm, InvalidResponse, PromptBase
from rich.table import Table

from domain.conversion import INVALID_AMOUNT_MESSAGE, ConversionRequest, InvalidAmountError, parse_amount
from domain.currencies import SUPPORTED_CURRENCIES, Currency, find_currency
from services.converter_session import FormAbortedError

CONTINUE_QUESTION = "Do you want to perform another conversion?"
AMOUNT_PLACEHOLDER = "e.g., 100.50"


class _StreamInput:
    """Treat an exhausted ``stream`` like an exhausted stdin."""

    @classmethod
    def get_input(cls, console: Console, prompt: str, password: bool, stream: TextIO | None = None) -> str:
        if stream is None:
            return console.input(prompt, password=password)
        value = console.input(prompt, password=password, stream=stream)
        if not value:
            raise EOFError("input stream closed")
        return value.rstrip("\r\n")


class CurrencyPrompt(_StreamInput, PromptBase[str]):
    response_type = str
    validate_error_message = "[prompt.invalid]Please select one of the listed currencies"

    def __init__(
        self,
        prompt: str,
        *,
        currencies: tuple[Currency, ...] = SUPPORTED_CURRENCIES,
        console: Console | None = None,
    ) -> None:
        super().__init__(prompt, console=console)
        self.currencies = currencies

    def process_response(self, value: str) -> str:
        currency = find_currency(value, self.currencies)
        if currency is None:
            raise InvalidResponse(self.validate_error_message)
        return currency.code


class AmountPrompt(_StreamInput, PromptBase[Decimal]):
    response_type = Decimal
    validate_error_message = f"[prompt.invalid]{INVALID_AMOUNT_MESSAGE}"

    def process_response(self, value: str) -> Decimal:
        try:
            return parse_amount(value)
        except InvalidAmountError as exc:
            raise InvalidResponse(self.validate_error_message) from exc


class ContinuePrompt(_StreamInput, Confirm):
    pass


class ConsoleConversionForm:
    def __init__(
        self,
        *,
        currencies: tuple[Currency, ...] = SUPPORTED_CURRENCIES,
        console: Console | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.currencies = currencies
        self.console = console or Console()
        self.stream = stream

    def collect_request(self) -> ConversionRequest:
        try:
            source = self._ask_currency("Convert from:", "Select the currency you want to convert from")
            target = self._ask_currency("Convert to:", "Select the currency you want to convert to")
            self.console.print("[bold]Amount:[/] Enter the amount you want to convert")
            amount = AmountPrompt(f"Amount [dim]({AMOUNT_PLACEHOLDER})[/]", console=self.console)(stream=self.stream)
        except (EOFError, KeyboardInterrupt) as exc:
            raise FormAbortedError(self._describe(exc)) from exc
        return ConversionRequest(source=source, target=target, amount=amount)

    def ask_continue(self) -> bool:
        try:
            return ContinuePrompt(CONTINUE_QUESTION, console=self.console)(default=True, stream=self.stream)
        except (EOFError, KeyboardInterrupt) as exc:
            raise FormAbortedError(self._describe(exc)) from exc

    def _ask_currency(self, title: str, description: str) -> str:
        self.console.print(self._options_table(title, description))
        prompt = CurrencyPrompt("Currency (code or number)", currencies=self.currencies, console=self.console)
        return prompt(stream=self.stream)

    def _options_table(self, title: str, description: str) -> Table:
        table = Table(title=f"[bold]{title}[/] {description}", title_justify="left", box=box.SIMPLE)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Currency")
        table.add_column("Code", style="bold")
        for index, currency in enumerate(self.currencies, start=1):
            table.add_row(str(index), currency.name, currency.code)
        return table

    @staticmethod
    def _describe(exc: BaseException) -> str:
        if isinstance(exc, KeyboardInterrupt):
            return "interrupted by user"
        return str(exc) or "input stream closed"


__all__ = ["AmountPrompt", "ConsoleConversionForm", "ContinuePrompt", "CurrencyPrompt"]
