"""
Tests for the swap form controller

Covers the driving-field state machine, pair changes, reversal and
submission gating.
"""

from dataclasses import replace
from decimal import Decimal
from typing import List

import pytest

from swapform.core.swap import (
    Asset,
    DrivingField,
    SubmissionRejected,
    SwapController,
    SwapErrorCode,
    SwapTrigger,
    UnknownAssetError,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def assets() -> List[Asset]:
    """Canonical list; order matters for auto-reassignment."""
    return [
        Asset(symbol="ETH", price_usd=Decimal("2000")),
        Asset(symbol="USDC", price_usd=Decimal("1")),
        Asset(symbol="WBTC", price_usd=Decimal("30000")),
        Asset(symbol="ZERO", price_usd=Decimal("0")),
    ]


@pytest.fixture
def controller(assets: List[Asset]) -> SwapController:
    return SwapController(
        assets,
        from_symbol="ETH",
        to_symbol="USDC",
        slippage_rate=Decimal("0.003"),
        max_balance=Decimal("1000"),
    )


# =============================================================================
# Construction
# =============================================================================

class TestInitialState:

    def test_starts_with_no_driving_field(self, controller: SwapController):
        state = controller.state

        assert state.from_asset.symbol == "ETH"
        assert state.to_asset.symbol == "USDC"
        assert state.from_amount == ""
        assert state.to_amount == ""
        assert state.driving_field == DrivingField.NONE
        assert state.in_flight is False
        assert controller.can_submit is False

    def test_rate_views(self, controller: SwapController):
        assert controller.rate == Decimal("2000")
        assert controller.adjusted_rate == Decimal("1994")
        assert controller.rate_error is False

    def test_falls_back_when_default_symbols_missing(self):
        assets = [
            Asset(symbol="ATOM", price_usd=Decimal("7")),
            Asset(symbol="OSMO", price_usd=Decimal("0.4")),
        ]
        controller = SwapController(assets, from_symbol="ETH", to_symbol="USDC")

        assert controller.state.from_asset.symbol == "ATOM"
        assert controller.state.to_asset.symbol == "OSMO"

    def test_identical_default_pair_is_split(self, assets: List[Asset]):
        controller = SwapController(assets, from_symbol="USDC", to_symbol="USDC")

        assert controller.state.from_asset.symbol == "USDC"
        assert controller.state.to_asset.symbol == "ETH"

    def test_requires_two_distinct_assets(self):
        eth = Asset(symbol="ETH", price_usd=Decimal("2000"))

        with pytest.raises(ValueError):
            SwapController([eth, Asset(symbol="ETH", price_usd=Decimal("1"))])

    def test_init_is_recorded(self, controller: SwapController):
        assert [t.trigger for t in controller.history] == [SwapTrigger.INIT]


# =============================================================================
# Editing
# =============================================================================

class TestEditing:

    def test_edit_from_drives_to(self, controller: SwapController):
        state = controller.edit_from("10")

        assert state.driving_field == DrivingField.FROM
        assert state.from_amount == "10"
        assert state.to_amount == "19940.00000000"
        assert state.from_error is None
        assert controller.can_submit is True

    def test_edit_to_drives_from(self, controller: SwapController):
        state = controller.edit_to("19940")

        assert state.driving_field == DrivingField.TO
        assert state.to_amount == "19940"
        assert state.from_amount == "10.00000000"

    def test_edit_from_after_to_recomputes(self, controller: SwapController):
        controller.edit_to("19940")
        state = controller.edit_from("5")

        assert state.driving_field == DrivingField.FROM
        assert state.to_amount == "9970.00000000"

    def test_input_is_cleaned(self, controller: SwapController):
        state = controller.edit_from("12.34.56")

        assert state.from_amount == "12.3456"
        assert state.to_amount == "24617.12640000"

    def test_empty_from_blanks_to_and_sets_error(self, controller: SwapController):
        controller.edit_from("10")
        state = controller.edit_from("")

        assert state.to_amount == ""
        assert state.from_error.error_code == SwapErrorCode.EMPTY_AMOUNT
        assert controller.error_message == "Please enter an amount to swap."

    def test_zero_from_keeps_text_and_error(self, controller: SwapController):
        state = controller.edit_from("0")

        assert state.from_amount == "0"
        assert state.to_amount == ""
        assert state.from_error.error_code == SwapErrorCode.NON_POSITIVE

    def test_over_balance_still_converts_but_blocks_submit(self, controller: SwapController):
        state = controller.edit_from("1500")

        assert state.to_amount == "2991000.00000000"
        assert state.from_error.error_code == SwapErrorCode.EXCEEDS_BALANCE
        assert controller.can_submit is False

    def test_error_clears_when_fixed(self, controller: SwapController):
        controller.edit_from("1500")
        state = controller.edit_from("15")

        assert state.from_error is None
        assert controller.error_message is None

    def test_valid_reverse_value_clears_from_error(self, controller: SwapController):
        controller.edit_from("0")
        state = controller.edit_to("997")

        assert state.from_amount == "0.50000000"
        assert state.from_error is None

    def test_invalid_to_blanks_from(self, controller: SwapController):
        controller.edit_to("997")
        state = controller.edit_to("0")

        assert state.from_amount == ""
        assert state.driving_field == DrivingField.TO

    def test_partial_keystroke_is_representable(self, controller: SwapController):
        state = controller.edit_from("1.")

        assert state.from_amount == "1."
        assert state.to_amount == "1994.00000000"

    def test_edit_dispatch(self, controller: SwapController):
        controller.edit(DrivingField.TO, "1994")
        assert controller.state.from_amount == "1.00000000"

        with pytest.raises(ValueError):
            controller.edit(DrivingField.NONE, "1")


# =============================================================================
# Pair Changes
# =============================================================================

class TestAssetSelection:

    def test_selecting_clears_amounts(self, controller: SwapController):
        controller.edit_from("10")
        state = controller.select_to("WBTC")

        assert state.to_asset.symbol == "WBTC"
        assert state.from_amount == ""
        assert state.to_amount == ""
        assert state.from_error is None
        assert state.driving_field == DrivingField.NONE

    def test_selecting_to_equal_to_from_reassigns_from(self, controller: SwapController):
        state = controller.select_to("ETH")

        assert state.to_asset.symbol == "ETH"
        assert state.from_asset.symbol == "USDC"
        assert state.from_asset != state.to_asset

    def test_selecting_from_equal_to_to_reassigns_to(self, controller: SwapController):
        state = controller.select_from("USDC")

        assert state.from_asset.symbol == "USDC"
        assert state.to_asset.symbol == "ETH"

    def test_select_accepts_asset_objects(self, controller: SwapController, assets: List[Asset]):
        state = controller.select(DrivingField.FROM, assets[2])

        assert state.from_asset.symbol == "WBTC"

    def test_symbol_lookup_is_case_insensitive(self, controller: SwapController):
        assert controller.select_to("wbtc").to_asset.symbol == "WBTC"

    def test_unknown_asset_raises(self, controller: SwapController):
        before = controller.state

        with pytest.raises(UnknownAssetError) as exc_info:
            controller.select_to("DOGE")

        assert exc_info.value.code == SwapErrorCode.UNKNOWN_ASSET
        assert controller.state is before

    def test_selectable_assets_hide_other_side(self, controller: SwapController):
        symbols = [a.symbol for a in controller.selectable_assets(DrivingField.FROM)]

        assert symbols == ["ETH", "WBTC", "ZERO"]


# =============================================================================
# Rate Unavailability
# =============================================================================

class TestRateUnavailable:

    def test_amounts_forced_blank(self, controller: SwapController):
        controller.select_to("ZERO")

        state = controller.edit_from("10")
        assert state.from_amount == ""
        assert state.to_amount == ""

        state = controller.edit_to("10")
        assert state.from_amount == ""
        assert state.to_amount == ""

    def test_pair_error_blocks_submit(self, controller: SwapController):
        controller.select_to("ZERO")
        controller.edit_from("10")

        assert controller.rate_error is True
        assert controller.can_submit is False
        assert controller.error_message == "Cannot calculate exchange rate for this token pair."
        assert controller.submission_error().code == SwapErrorCode.RATE_UNAVAILABLE
        assert controller.snapshot()["rate"] is None

    def test_recovers_after_pair_change(self, controller: SwapController):
        controller.select_to("ZERO")
        controller.select_to("USDC")
        state = controller.edit_from("1")

        assert state.to_amount == "1994.00000000"
        assert controller.rate_error is False


# =============================================================================
# Reversal
# =============================================================================

class TestReverse:

    def test_reverse_moves_amounts_and_redrives(self, controller: SwapController):
        controller.edit_from("0.5")
        state = controller.reverse()

        assert state.from_asset.symbol == "USDC"
        assert state.to_asset.symbol == "ETH"
        assert state.from_amount == "997.00000000"
        assert state.to_amount == "0.49700450"
        assert state.driving_field == DrivingField.FROM
        assert state.from_error is None

    def test_reverse_revalidates_new_from(self, controller: SwapController):
        controller.edit_from("10")
        state = controller.reverse()

        assert state.from_amount == "19940.00000000"
        assert state.to_amount == "9.94009000"
        assert state.from_error.error_code == SwapErrorCode.EXCEEDS_BALANCE

    def test_reverse_from_empty_form(self, controller: SwapController):
        state = controller.reverse()

        assert state.from_asset.symbol == "USDC"
        assert state.from_amount == ""
        assert state.to_amount == ""
        assert state.driving_field == DrivingField.FROM


# =============================================================================
# Submission Gating
# =============================================================================

class TestSubmissionGating:

    def test_empty_form_rejected(self, controller: SwapController):
        with pytest.raises(SubmissionRejected) as exc_info:
            controller.begin_submission()

        assert exc_info.value.code == SwapErrorCode.EMPTY_AMOUNT

    def test_derived_from_amount_is_checked_against_balance(self, controller: SwapController):
        controller.edit_to("19940000")

        assert controller.state.from_error is None
        assert controller.submission_error().code == SwapErrorCode.EXCEEDS_BALANCE

    def test_identical_assets_rejected(self, controller: SwapController):
        controller.edit_from("1")
        controller._state = replace(controller.state, to_asset=controller.state.from_asset)

        assert controller.submission_error().code == SwapErrorCode.IDENTICAL_ASSETS

    def test_begin_submission_locks_form(self, controller: SwapController):
        controller.edit_from("10")
        request = controller.begin_submission()

        assert request.from_amount == "10"
        assert request.to_amount == "19940.00000000"
        assert controller.in_flight is True
        assert controller.can_submit is False
        assert controller.snapshot()["toFieldLocked"] is True


# =============================================================================
# History & Snapshot
# =============================================================================

class TestHistory:

    def test_transitions_recorded(self, controller: SwapController):
        controller.edit_from("1")
        controller.edit_to("2")
        controller.select_to("WBTC")

        history = controller.history
        assert [t.trigger for t in history] == [
            SwapTrigger.INIT,
            SwapTrigger.EDIT_FROM,
            SwapTrigger.EDIT_TO,
            SwapTrigger.SELECT_TO,
        ]
        assert history[2].from_driving == DrivingField.FROM
        assert history[2].to_driving == DrivingField.TO
        assert history[3].to_driving == DrivingField.NONE

    def test_history_is_bounded(self, assets: List[Asset]):
        controller = SwapController(assets, history_limit=3)
        for amount in ("1", "2", "3", "4"):
            controller.edit_from(amount)

        assert len(controller.history) == 3

    def test_snapshot_shape(self, controller: SwapController):
        controller.edit_from("10")
        snapshot = controller.snapshot()

        assert snapshot["fromAsset"]["symbol"] == "ETH"
        assert snapshot["toAmount"] == "19940.00000000"
        assert snapshot["drivingField"] == "from"
        assert snapshot["rate"] == "2000.00000000"
        assert snapshot["adjustedRate"] == "1994.00000000"
        assert snapshot["slippagePercent"] == "0.300"
        assert snapshot["error"] is None
        assert snapshot["canSubmit"] is True
        assert snapshot["settlement"] == "idle"
