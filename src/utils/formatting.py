from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

CENTS = Decimal("0.01")
RATE_STEP = Decimal("0.0001")


def _quantize(value: Decimal, step: Decimal) -> Decimal:
    with localcontext() as ctx:
        # Large amounts need more significant digits than the default context holds.
        ctx.prec = max(ctx.prec, value.adjusted() - step.as_tuple().exponent + 2)
        return value.quantize(step, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    return f"{_quantize(value, CENTS):f}"


def format_rate(value: Decimal) -> str:
    return f"{_quantize(value, RATE_STEP):f}"
