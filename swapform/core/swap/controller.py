"""
Swap Form Controller

Keeps the amount to send and the amount to receive in sync. The field the
user edited last is the driving field; the other one is derived from it
through the slippage-adjusted rate. Every transition replaces the state and
then runs a single recompute step, so the two fields never update each other.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from decimal import Decimal
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple, Union

from ...config import settings
from .constants import MESSAGES
from .errors import (
    FieldLockedError,
    SubmissionRejected,
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
    format_rate,
    rate_available,
    resolve_rate,
    to_decimal,
)
from .validation import clean_amount_text, validate_amount

AssetRef = Union[Asset, str]


class SwapController:
    """
    State machine behind a two-field swap form.

    States are the values of ``DrivingField``:
    - NONE: both amounts blank; initial state and re-entered after a pair change
    - FROM: the amount to send drives the amount to receive
    - TO: the amount to receive drives the amount to send
    """

    def __init__(
        self,
        assets: Sequence[Asset],
        *,
        from_symbol: Optional[str] = None,
        to_symbol: Optional[str] = None,
        slippage_rate: Optional[Decimal] = None,
        max_balance: Optional[Decimal] = None,
        history_limit: Optional[int] = None,
        session_id: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the controller.

        Args:
            assets: Canonical asset list; order decides auto-reassignment
            from_symbol: Initial asset to send (default: settings.default_from_symbol)
            to_symbol: Initial asset to receive (default: settings.default_to_symbol)
            slippage_rate: Fractional slippage (default: settings.slippage_rate)
            max_balance: Balance bound for the amount to send (default: settings.max_balance)
            history_limit: Transitions kept in memory
            session_id: Identifier used in log lines
            logger: Optional logger
        """
        catalog: List[Asset] = []
        for asset in assets:
            if asset not in catalog:
                catalog.append(asset)
        if len(catalog) < 2:
            raise ValueError("A swap needs at least two distinct assets")

        self.assets: Tuple[Asset, ...] = tuple(catalog)
        self.slippage_rate = Decimal(str(settings.slippage_rate if slippage_rate is None else slippage_rate))
        self.max_balance = Decimal(str(settings.max_balance if max_balance is None else max_balance))
        self.session_id = session_id or "local"
        self.logger = logger or logging.getLogger(__name__)

        limit = history_limit or settings.transition_history_limit
        self._history: Deque[SwapTransition] = deque(maxlen=limit)

        from_asset = self._find(from_symbol or settings.default_from_symbol) or self.assets[0]
        to_asset = self._find(to_symbol or settings.default_to_symbol)
        if to_asset is None or to_asset == from_asset:
            to_asset = self._first_other_than(from_asset)

        self._state = SwapState(from_asset=from_asset, to_asset=to_asset)
        self._record(SwapTrigger.INIT, DrivingField.NONE, self._state, {})

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SwapState:
        return self._state

    @property
    def driving_field(self) -> DrivingField:
        return self._state.driving_field

    @property
    def in_flight(self) -> bool:
        return self._state.in_flight

    @property
    def rate(self) -> Decimal:
        return resolve_rate(self._state.from_asset, self._state.to_asset)

    @property
    def adjusted_rate(self) -> Decimal:
        return adjusted_rate(self.rate, self.slippage_rate)

    @property
    def rate_error(self) -> bool:
        return not rate_available(self.rate)

    @property
    def error_message(self) -> Optional[str]:
        """Pair-level error first, then the error on the amount to send."""
        if self.rate_error:
            return MESSAGES["rate_unavailable"]
        if self._state.from_error is not None:
            return self._state.from_error.error_message
        return None

    @property
    def history(self) -> List[SwapTransition]:
        return list(self._history)

    @property
    def can_submit(self) -> bool:
        return self.submission_error() is None

    def validate_from_amount(self) -> ValidationOutcome:
        return validate_amount(
            self._state.from_amount,
            self.max_balance,
            self._state.from_asset.symbol,
        )

    def submission_error(self) -> Optional[SubmissionRejected]:
        """Reason the current state cannot be submitted, or None."""
        state = self._state
        if state.in_flight:
            return SubmissionRejected(MESSAGES["in_flight"], SwapErrorCode.IN_FLIGHT)
        if state.from_asset == state.to_asset:
            return SubmissionRejected(MESSAGES["identical_assets"], SwapErrorCode.IDENTICAL_ASSETS)
        if self.rate_error:
            return SubmissionRejected(MESSAGES["rate_unavailable"], SwapErrorCode.RATE_UNAVAILABLE)
        outcome = self.validate_from_amount()
        if not outcome.ok:
            return SubmissionRejected(
                outcome.error_message or MESSAGES["not_a_number"],
                outcome.error_code or SwapErrorCode.NOT_A_NUMBER,
                {"amount": outcome.normalized_amount},
            )
        return None

    def selectable_assets(self, side: DrivingField) -> List[Asset]:
        """Assets offered by the picker on ``side``; the opposite asset is hidden."""
        other = self._state.to_asset if side == DrivingField.FROM else self._state.from_asset
        return [asset for asset in self.assets if asset != other]

    def snapshot(self) -> Dict[str, Any]:
        """Plain representation consumed by render layers."""
        state = self._state
        rate = self.rate
        error = None
        if self.rate_error:
            error = {"code": SwapErrorCode.RATE_UNAVAILABLE.value, "message": MESSAGES["rate_unavailable"]}
        elif state.from_error is not None and state.from_error.error_code is not None:
            error = {"code": state.from_error.error_code.value, "message": state.from_error.error_message}

        return {
            "sessionId": self.session_id,
            "fromAsset": state.from_asset.to_dict(),
            "toAsset": state.to_asset.to_dict(),
            "fromAmount": state.from_amount,
            "toAmount": state.to_amount,
            "drivingField": state.driving_field.value,
            "inFlight": state.in_flight,
            "toFieldLocked": state.in_flight,
            "rate": format_rate(rate),
            "adjustedRate": format_rate(self.adjusted_rate),
            "slippagePercent": str(self.slippage_rate * 100),
            "maxBalance": str(self.max_balance),
            "error": error,
            "canSubmit": self.can_submit,
            "settlement": state.settlement.value,
            "lastReceipt": state.last_receipt.to_dict() if state.last_receipt else None,
            "lastFailure": state.last_failure,
        }

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def edit_from(self, text: Optional[str]) -> SwapState:
        """User typed into the amount to send."""
        state = replace(
            self._state,
            from_amount=clean_amount_text(text),
            driving_field=DrivingField.FROM,
        )
        return self._commit(SwapTrigger.EDIT_FROM, state, {"text": text})

    def edit_to(self, text: Optional[str]) -> SwapState:
        """User typed into the amount to receive."""
        if self._state.in_flight:
            raise FieldLockedError(MESSAGES["field_locked"], DrivingField.TO.value)
        state = replace(
            self._state,
            to_amount=clean_amount_text(text),
            driving_field=DrivingField.TO,
        )
        return self._commit(SwapTrigger.EDIT_TO, state, {"text": text})

    def edit(self, field: DrivingField, text: Optional[str]) -> SwapState:
        if field == DrivingField.FROM:
            return self.edit_from(text)
        if field == DrivingField.TO:
            return self.edit_to(text)
        raise ValueError(f"Cannot edit field {field!r}")

    def select_from(self, asset: AssetRef) -> SwapState:
        """Pick a new asset to send."""
        selected = self._resolve(asset)
        to_asset = self._state.to_asset
        if selected == to_asset:
            to_asset = self._first_other_than(selected)
        return self._commit_pair_change(SwapTrigger.SELECT_FROM, selected, to_asset)

    def select_to(self, asset: AssetRef) -> SwapState:
        """Pick a new asset to receive."""
        selected = self._resolve(asset)
        from_asset = self._state.from_asset
        if selected == from_asset:
            from_asset = self._first_other_than(selected)
        return self._commit_pair_change(SwapTrigger.SELECT_TO, from_asset, selected)

    def select(self, side: DrivingField, asset: AssetRef) -> SwapState:
        if side == DrivingField.FROM:
            return self.select_from(asset)
        if side == DrivingField.TO:
            return self.select_to(asset)
        raise ValueError(f"Cannot select an asset for side {side!r}")

    def reverse(self) -> SwapState:
        """Exchange the pair and the typed amounts; the new send amount drives."""
        current = self._state
        state = replace(
            current,
            from_asset=current.to_asset,
            to_asset=current.from_asset,
            from_amount=current.to_amount,
            to_amount=current.from_amount,
            driving_field=DrivingField.FROM,
            from_error=None,
        )
        return self._commit(SwapTrigger.REVERSE, state, {})

    # ------------------------------------------------------------------
    # Settlement hooks (driven by SettlementSimulator)
    # ------------------------------------------------------------------

    def begin_submission(self) -> SettlementRequest:
        """Accept the current amounts for settlement and lock the form.

        Raises:
            SubmissionRejected: If the form cannot be submitted; state is unchanged
        """
        error = self.submission_error()
        if error is not None:
            self.logger.warning(
                f"Swap {self.session_id}: submission rejected ({error.code.value}): {error.message}"
            )
            raise error

        state = self._state
        request = SettlementRequest(
            from_asset=state.from_asset,
            to_asset=state.to_asset,
            from_amount=self.validate_from_amount().normalized_amount,
            to_amount=state.to_amount,
            rate=self.rate,
        )
        new_state = replace(
            state,
            in_flight=True,
            settlement=SettlementStatus.IN_FLIGHT,
            last_failure=None,
        )
        self._commit(SwapTrigger.SUBMIT, new_state, {"requestId": request.id})
        return request

    def complete_settlement(self, request: SettlementRequest) -> SettlementReceipt:
        receipt = SettlementReceipt(
            from_symbol=request.from_asset.symbol,
            to_symbol=request.to_asset.symbol,
            from_amount=request.from_amount,
            to_amount=request.to_amount,
        )
        state = replace(
            self._state,
            from_amount="",
            to_amount="",
            driving_field=DrivingField.NONE,
            in_flight=False,
            from_error=None,
            settlement=SettlementStatus.SETTLED,
            last_receipt=receipt,
            last_failure=None,
        )
        self._commit(SwapTrigger.SETTLED, state, {"requestId": request.id, "receiptId": receipt.id})
        return receipt

    def fail_settlement(self, request: SettlementRequest, reason: str) -> SwapState:
        """Return to NONE without clearing the typed amounts so the user can retry."""
        state = replace(
            self._state,
            driving_field=DrivingField.NONE,
            in_flight=False,
            settlement=SettlementStatus.FAILED,
            last_failure=MESSAGES["settlement_failed"].format(reason=reason),
        )
        return self._commit(
            SwapTrigger.SETTLEMENT_FAILED,
            state,
            {"requestId": request.id, "reason": reason},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit_pair_change(self, trigger: SwapTrigger, from_asset: Asset, to_asset: Asset) -> SwapState:
        # A new rate invalidates anything computed under the old one
        state = replace(
            self._state,
            from_asset=from_asset,
            to_asset=to_asset,
            from_amount="",
            to_amount="",
            from_error=None,
            driving_field=DrivingField.NONE,
        )
        return self._commit(
            trigger,
            state,
            {"from": from_asset.symbol, "to": to_asset.symbol},
        )

    def _commit(self, trigger: SwapTrigger, state: SwapState, detail: Dict[str, Any]) -> SwapState:
        previous = self._state.driving_field
        self._state = self._recompute(state)
        self._record(trigger, previous, self._state, detail)
        return self._state

    def _recompute(self, state: SwapState) -> SwapState:
        """Derive the non-driving field from the driving one."""
        rate = resolve_rate(state.from_asset, state.to_asset)
        if not rate_available(rate):
            return replace(state, from_amount="", to_amount="", from_error=None)

        if state.driving_field == DrivingField.FROM:
            outcome = validate_amount(state.from_amount, self.max_balance, state.from_asset.symbol)
            from_error = None if outcome.ok else outcome
            amount = to_decimal(state.from_amount)
            if amount is None or amount <= 0:
                return replace(state, to_amount="", from_error=from_error)
            derived = convert_amount(amount, rate, ConversionDirection.FORWARD, self.slippage_rate)
            return replace(state, to_amount=format_amount(derived), from_error=from_error)

        if state.driving_field == DrivingField.TO:
            amount = to_decimal(state.to_amount)
            if amount is None or amount <= 0:
                return replace(state, from_amount="")
            derived = convert_amount(amount, rate, ConversionDirection.REVERSE, self.slippage_rate)
            return replace(state, from_amount=format_amount(derived), from_error=None)

        return state

    def _record(
        self,
        trigger: SwapTrigger,
        previous: DrivingField,
        state: SwapState,
        detail: Dict[str, Any],
    ) -> None:
        transition = SwapTransition(
            trigger=trigger,
            from_driving=previous,
            to_driving=state.driving_field,
            detail=detail,
        )
        self._history.append(transition)
        self.logger.info(
            f"Swap {self.session_id}: {trigger.value} "
            f"{previous.value} -> {state.driving_field.value} "
            f"[{state.from_asset.symbol}->{state.to_asset.symbol}]"
        )

    def _find(self, symbol: Optional[str]) -> Optional[Asset]:
        target = (symbol or "").strip().upper()
        if not target:
            return None
        for asset in self.assets:
            if asset.symbol.upper() == target:
                return asset
        return None

    def _resolve(self, asset: AssetRef) -> Asset:
        symbol = asset.symbol if isinstance(asset, Asset) else str(asset)
        found = self._find(symbol)
        if found is None:
            raise UnknownAssetError(MESSAGES["unknown_asset"].format(symbol=symbol), symbol)
        return found

    def _first_other_than(self, asset: Asset) -> Asset:
        for candidate in self.assets:
            if candidate != asset:
                return candidate
        # Unreachable: the catalog holds at least two distinct assets
        raise ValueError("No alternative asset available")
