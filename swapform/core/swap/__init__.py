"""
Swap Form Module

Bidirectional amount synchronization, validation and simulated settlement
for a two-asset swap form.
"""

from .controller import SwapController
from .errors import (
    FieldLockedError,
    SettlementError,
    SubmissionRejected,
    SwapError,
    SwapErrorCode,
    UnknownAssetError,
)
from .models import (
    Asset,
    DrivingField,
    SettlementReceipt,
    SettlementRequest,
    SettlementStatus,
    SwapState,
    SwapTransition,
    SwapTrigger,
    ValidationOutcome,
)
from .pricing import (
    ConversionDirection,
    adjusted_rate,
    convert_amount,
    format_amount,
    rate_available,
    resolve_rate,
)
from .sessions import SwapSession, SwapSessionRegistry, get_session_registry
from .settlement import SettlementSimulator
from .validation import clean_amount_text, validate_amount

__all__ = [
    # State Machine
    "SwapController",
    "SettlementSimulator",
    # Sessions
    "SwapSession",
    "SwapSessionRegistry",
    "get_session_registry",
    # Pure functions
    "resolve_rate",
    "rate_available",
    "adjusted_rate",
    "convert_amount",
    "format_amount",
    "ConversionDirection",
    "clean_amount_text",
    "validate_amount",
    # Models
    "Asset",
    "DrivingField",
    "SettlementReceipt",
    "SettlementRequest",
    "SettlementStatus",
    "SwapState",
    "SwapTransition",
    "SwapTrigger",
    "ValidationOutcome",
    # Errors
    "SwapError",
    "SwapErrorCode",
    "SubmissionRejected",
    "FieldLockedError",
    "UnknownAssetError",
    "SettlementError",
]
