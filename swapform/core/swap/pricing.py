"""Exchange rate resolution and slippage-adjusted amount conversion."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Optional, Union

from .constants import AMOUNT_QUANTUM, UNAVAILABLE_RATE
from .models import Asset

Number = Union[Decimal, str, int, float]

_ZERO = Decimal("0")
_ONE = Decimal("1")


class ConversionDirection(str, Enum):
    FORWARD = "forward"   # from -> to
    REVERSE = "reverse"   # to -> from


def to_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Parse ``value`` into a finite Decimal, or None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not parsed.is_finite():
        return None
    return parsed


def resolve_rate(from_asset: Asset, to_asset: Asset) -> Decimal:
    """Units of ``to_asset`` per unit of ``from_asset``.

    Returns ``UNAVAILABLE_RATE`` when either price is missing or the target
    price is not positive. Never raises.
    """
    from_price = to_decimal(from_asset.price_usd)
    to_price = to_decimal(to_asset.price_usd)
    if from_price is None or to_price is None:
        return UNAVAILABLE_RATE
    if to_price <= 0 or from_price <= 0:
        return UNAVAILABLE_RATE
    return from_price / to_price


def rate_available(rate: Optional[Decimal]) -> bool:
    return rate is not None and rate.is_finite() and rate > 0


def adjusted_rate(rate: Decimal, slippage_rate: Decimal) -> Decimal:
    """Rate actually used for conversion in both directions."""
    if not rate_available(rate):
        return UNAVAILABLE_RATE
    return rate * (_ONE - Decimal(str(slippage_rate)))


def convert_amount(
    amount: Optional[Number],
    rate: Decimal,
    direction: ConversionDirection,
    slippage_rate: Decimal,
) -> Decimal:
    """Derive the complementary amount from the driving ``amount``.

    A missing or non-positive amount, or an unavailable rate, yields zero;
    an absent derived value is not a validation failure.
    """
    value = to_decimal(amount)
    if value is None or value <= 0:
        return _ZERO

    effective = adjusted_rate(rate, slippage_rate)
    if effective <= 0:
        return _ZERO

    if direction == ConversionDirection.REVERSE:
        return value / effective
    return value * effective


def _quantize(value: Decimal) -> Decimal:
    # Widen precision so large values keep all fractional digits
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 1 - AMOUNT_QUANTUM.as_tuple().exponent)
        return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Render a derived amount with fixed precision; zero becomes blank."""
    if value is None or not value.is_finite() or value <= 0:
        return ""
    quantized = _quantize(value)
    if quantized == 0:
        return ""
    return f"{quantized:f}"


def format_rate(rate: Decimal) -> Optional[str]:
    """Rate as shown next to the pair, or None when unavailable."""
    if not rate_available(rate):
        return None
    return f"{_quantize(rate):f}"
