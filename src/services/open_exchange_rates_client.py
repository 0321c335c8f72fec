from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from types import MappingProxyType, TracebackType
from typing import Any

import requests
from requests import Response

from domain.rates import RateTable

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openexchangerates.org/api"


# API docs: https://docs.openexchangerates.org/reference/latest-json
# API keys: https://openexchangerates.org/account/app-ids
class OpenExchangeRatesAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RatesRequestError(OpenExchangeRatesAPIError):
    """The request did not complete or came back with a non-2xx status."""


class RatesDecodeError(OpenExchangeRatesAPIError):
    """The response body is not a usable rate table."""


class OpenExchangeRatesClient:
    def __init__(
        self,
        *,
        app_id: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not app_id:
            msg = "app_id must be provided"
            raise ValueError(msg)

        self.app_id = app_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def get_latest_rates(self) -> RateTable:
        payload = self._request("GET", "/latest.json")

        base_currency = payload.get("base")
        rates_raw = payload.get("rates")
        if not base_currency or not isinstance(rates_raw, dict):
            raise RatesDecodeError("Open Exchange Rates payload missing required fields", payload=payload)

        parsed_rates: dict[str, Decimal] = {}
        for code_raw, rate_raw in rates_raw.items():
            rate = self._to_rate(code_raw, rate_raw, payload)
            if rate is None:
                logger.warning("Skipping unusable Open Exchange Rates rate for %s: %r", code_raw, rate_raw)
                continue
            parsed_rates[str(code_raw).upper()] = rate
        table = RateTable(
            base=str(base_currency).upper(),
            rates=MappingProxyType(parsed_rates),
            timestamp=self._to_timestamp(payload.get("timestamp")),
        )
        logger.info("Fetched %d rates against %s", len(parsed_rates), table.base)
        return table

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> OpenExchangeRatesClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _request(self, method: str, path: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        params = {"app_id": self.app_id}
        logger.info("%s %s", method, url)
        try:
            response = self._session.request(method, url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            message, payload = self._extract_error(resp)
            raise RatesRequestError(message, status_code=status_code, payload=payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise RatesRequestError(
                f"Open Exchange Rates request failed: {exc}", status_code=status_code
            ) from exc

        try:
            payload_raw = response.json()
        except ValueError as exc:
            raise RatesDecodeError("Open Exchange Rates returned invalid JSON", payload=response.text) from exc

        if not isinstance(payload_raw, dict):
            raise RatesDecodeError("Open Exchange Rates returned unexpected payload type", payload=payload_raw)

        if payload_raw.get("error"):
            message = payload_raw.get("description") or payload_raw.get("message") or "Open Exchange Rates error"
            raise RatesDecodeError(message, status_code=payload_raw.get("status"), payload=payload_raw)

        return payload_raw

    @staticmethod
    def _to_rate(code: Any, value: Any, payload: dict[str, Any]) -> Decimal | None:
        """Parse one rate; None for null, non-finite or non-positive entries."""
        if value is None:
            return None
        if isinstance(value, bool):
            raise RatesDecodeError(f"Open Exchange Rates returned a non-numeric rate for {code}", payload=payload)
        try:
            rate = Decimal(str(value))
        except InvalidOperation as exc:
            raise RatesDecodeError(
                f"Open Exchange Rates returned a non-numeric rate for {code}", payload=payload
            ) from exc
        if not rate.is_finite() or rate <= 0:
            return None
        return rate

    @staticmethod
    def _to_timestamp(value: Any) -> datetime | None:
        if value is None:
            return None
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            logger.warning("Ignoring unparseable Open Exchange Rates timestamp: %r", value)
            return None

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str, Any | None]:
        message = "Open Exchange Rates request failed"
        payload: Any | None = None
        if response is None:
            return message, payload

        try:
            payload = response.json()
            if isinstance(payload, dict):
                message = payload.get("description") or payload.get("message") or message
        except ValueError:
            payload = response.text
        return message, payload


__all__ = [
    "DEFAULT_BASE_URL",
    "OpenExchangeRatesAPIError",
    "OpenExchangeRatesClient",
    "RatesDecodeError",
    "RatesRequestError",
]
