"""Validation of the amount being sent."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional, Union

from .constants import MESSAGES
from .errors import SwapErrorCode
from .models import ValidationOutcome
from .pricing import to_decimal

_DISALLOWED_CHARS = re.compile(r"[^0-9.]")


def clean_amount_text(text: Optional[str]) -> str:
    """Keep digits and a single decimal point.

    Extra decimal points are dropped and the digit groups after the first one
    are joined, so "12.34.56" becomes "12.3456".
    """
    cleaned = _DISALLOWED_CHARS.sub("", text or "")
    parts = cleaned.split(".")
    if len(parts) > 2:
        return parts[0] + "." + "".join(parts[1:])
    return cleaned


def _failure(cleaned: str, code: SwapErrorCode, message: str) -> ValidationOutcome:
    return ValidationOutcome(
        ok=False,
        normalized_amount=cleaned,
        error_code=code,
        error_message=message,
    )


def validate_amount(
    text: Optional[str],
    max_balance: Union[Decimal, str, int],
    symbol: Optional[str] = None,
) -> ValidationOutcome:
    """Validate a raw amount against the available balance.

    Checks run in order and the first failure wins: empty, not a number,
    not positive, above ``max_balance``.
    """
    cleaned = clean_amount_text(text)

    if not cleaned.strip():
        return _failure(cleaned, SwapErrorCode.EMPTY_AMOUNT, MESSAGES["empty_amount"])

    value = to_decimal(cleaned)
    if value is None:
        return _failure(cleaned, SwapErrorCode.NOT_A_NUMBER, MESSAGES["not_a_number"])

    if value <= 0:
        return _failure(cleaned, SwapErrorCode.NON_POSITIVE, MESSAGES["non_positive"])

    limit = Decimal(str(max_balance))
    if value > limit:
        message = MESSAGES["exceeds_balance"].format(max_balance=limit, symbol=symbol or "")
        if not symbol:
            message = message.replace(" .", ".")
        return _failure(cleaned, SwapErrorCode.EXCEEDS_BALANCE, message)

    return ValidationOutcome(ok=True, normalized_amount=cleaned, value=value)
