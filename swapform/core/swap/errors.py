"""
Swap Errors

Error codes and exceptions raised by the swap form engine. Every error is
recoverable by further user input; none of them is fatal to the process.
"""

from enum import Enum
from typing import Any, Dict, Optional


class SwapErrorCode(str, Enum):
    """Error codes surfaced to render layers and API clients."""

    # Field-level, attached to the amount being sent
    EMPTY_AMOUNT = "empty_amount"
    NOT_A_NUMBER = "not_a_number"
    NON_POSITIVE = "non_positive"
    EXCEEDS_BALANCE = "exceeds_balance"

    # Pair-level
    RATE_UNAVAILABLE = "rate_unavailable"
    IDENTICAL_ASSETS = "identical_assets"
    UNKNOWN_ASSET = "unknown_asset"

    # Submission / settlement
    IN_FLIGHT = "in_flight"
    FIELD_LOCKED = "field_locked"
    SETTLEMENT_FAILED = "settlement_failed"


class SwapError(Exception):
    """Base class for swap engine errors."""

    def __init__(
        self,
        message: str,
        code: SwapErrorCode,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class SubmissionRejected(SwapError):
    """Submission refused at the boundary; swap state is left untouched."""


class FieldLockedError(SwapError):
    """An edit was attempted on a field disabled while a swap is in flight."""

    def __init__(self, message: str, field: str):
        super().__init__(message, SwapErrorCode.FIELD_LOCKED, {"field": field})
        self.field = field


class UnknownAssetError(SwapError):
    """A symbol that is not part of the token catalog was selected."""

    def __init__(self, message: str, symbol: str):
        super().__init__(message, SwapErrorCode.UNKNOWN_ASSET, {"symbol": symbol})
        self.symbol = symbol


class SettlementError(SwapError):
    """Settlement could not be completed.

    The simulated settlement never raises this itself; it is the hook a real
    backend integration uses to report failure.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SwapErrorCode.SETTLEMENT_FAILED, details)
