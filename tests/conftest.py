from decimal import Decimal
from typing import Generator

import pytest

from config import config
from domain.rates import RateTable


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Generator[None, None, None]:
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def usd_rates() -> RateTable:
    return RateTable(
        base="USD",
        rates={
            "USD": Decimal("1.0"),
            "EUR": Decimal("0.85"),
            "GBP": Decimal("0.8"),
            "JPY": Decimal("150.25"),
        },
    )
