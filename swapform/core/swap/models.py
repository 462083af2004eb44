"""
Swap Form Models

Assets, the swap form state, validation outcomes, transitions and
settlement receipts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from ...config import settings
from .constants import MESSAGES, RECEIPT_DECIMALS
from .errors import SwapErrorCode


class DrivingField(str, Enum):
    """Which amount field the user is editing; the other one is derived."""

    NONE = "none"    # Both fields blank, e.g. right after a pair change
    FROM = "from"    # Amount to send drives the amount to receive
    TO = "to"        # Amount to receive drives the amount to send


class SettlementStatus(str, Enum):
    """Outcome of the most recent submission."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"
    FAILED = "failed"


class SwapTrigger(str, Enum):
    """What caused a swap state transition."""

    INIT = "init"
    EDIT_FROM = "edit_from"
    EDIT_TO = "edit_to"
    SELECT_FROM = "select_from"
    SELECT_TO = "select_to"
    REVERSE = "reverse"
    SUBMIT = "submit"
    SETTLED = "settled"
    SETTLEMENT_FAILED = "settlement_failed"


@dataclass(frozen=True)
class Asset:
    """Immutable price snapshot of a token. Assets compare by symbol only."""

    symbol: str
    price_usd: Optional[Decimal] = field(default=None, compare=False)
    name: str = field(default="", compare=False)
    icon_url: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.symbol)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "priceUsd": str(self.price_usd) if self.price_usd is not None else None,
            "iconUrl": self.icon_url,
            "fallbackIconUrl": settings.fallback_icon_url,
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a raw amount string."""

    ok: bool
    normalized_amount: str
    value: Optional[Decimal] = None
    error_code: Optional[SwapErrorCode] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "normalizedAmount": self.normalized_amount,
            "errorCode": self.error_code.value if self.error_code else None,
            "errorMessage": self.error_message,
        }


@dataclass(frozen=True)
class SettlementRequest:
    """Snapshot of an accepted submission handed to the settlement simulator."""

    from_asset: Asset
    to_asset: Asset
    from_amount: str
    to_amount: str
    rate: Decimal
    id: str = field(default_factory=lambda: str(uuid4()))
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class SettlementReceipt:
    """Reported when a simulated settlement completes."""

    from_symbol: str
    to_symbol: str
    from_amount: str
    to_amount: str
    settled_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def message(self) -> str:
        amount = Decimal(self.to_amount or "0")
        return MESSAGES["settlement_success"].format(
            amount=f"{amount:.{RECEIPT_DECIMALS}f}",
            symbol=self.to_symbol,
        )

    def expires_at(self, ttl_seconds: Optional[float] = None) -> datetime:
        """When clients should stop showing the success message."""
        ttl = settings.success_message_ttl_seconds if ttl_seconds is None else ttl_seconds
        return self.settled_at + timedelta(seconds=ttl)

    def to_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        expires_at = self.expires_at()
        now = now or datetime.now(timezone.utc)
        return {
            "id": self.id,
            "fromSymbol": self.from_symbol,
            "toSymbol": self.to_symbol,
            "fromAmount": self.from_amount,
            "toAmount": self.to_amount,
            "settledAt": self.settled_at.isoformat(),
            "message": self.message,
            "expiresAt": expires_at.isoformat(),
            "showMessage": now < expires_at,
        }


@dataclass(frozen=True)
class SwapState:
    """Full state of one swap form.

    Amounts are raw text so that intermediate keystrokes ("1.", "") can be
    represented. Each transition replaces the state as a whole.
    """

    from_asset: Asset
    to_asset: Asset
    from_amount: str = ""
    to_amount: str = ""
    driving_field: DrivingField = DrivingField.NONE
    in_flight: bool = False
    from_error: Optional[ValidationOutcome] = None
    settlement: SettlementStatus = SettlementStatus.IDLE
    last_receipt: Optional[SettlementReceipt] = None
    last_failure: Optional[str] = None


@dataclass
class SwapTransition:
    """Record of a swap state transition."""

    trigger: SwapTrigger
    from_driving: DrivingField
    to_driving: DrivingField
    id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "trigger": self.trigger.value,
            "fromDriving": self.from_driving.value,
            "toDriving": self.to_driving.value,
            "timestamp": self.timestamp.isoformat(),
            "detail": self.detail,
        }
