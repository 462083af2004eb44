from decimal import Decimal

from swapform.config import Settings


def test_defaults(monkeypatch):
    """Swap engine defaults match the documented form behaviour."""

    for name in ("SWAPFORM_SLIPPAGE_RATE", "SWAPFORM_MAX_BALANCE", "SWAPFORM_SETTLEMENT_DELAY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.slippage_rate == Decimal("0.003")
    assert settings.slippage_percent == Decimal("0.3")
    assert settings.max_balance == Decimal("1000")
    assert settings.default_from_symbol == "ETH"
    assert settings.default_to_symbol == "USDC"
    assert settings.has_token_list is True


def test_slippage_from_env(monkeypatch):
    """Prefixed environment variables override the defaults."""

    monkeypatch.setenv("SWAPFORM_SLIPPAGE_RATE", "0.01")

    settings = Settings(_env_file=None)

    assert settings.slippage_rate == Decimal("0.01")


def test_settlement_delay_alias(monkeypatch):
    """The short delay name is accepted alongside the full field name."""

    monkeypatch.delenv("SWAPFORM_SETTLEMENT_DELAY_SECONDS", raising=False)
    monkeypatch.setenv("SWAPFORM_SETTLEMENT_DELAY", "0.5")

    settings = Settings(_env_file=None)

    assert settings.settlement_delay_seconds == 0.5


def test_identical_default_pair_drops_receive_side(monkeypatch):
    """A default pair with the same asset on both sides keeps only the send side."""

    monkeypatch.setenv("SWAPFORM_DEFAULT_FROM_SYMBOL", "usdc")
    monkeypatch.setenv("SWAPFORM_DEFAULT_TO_SYMBOL", "USDC")

    settings = Settings(_env_file=None)

    assert settings.default_from_symbol == "usdc"
    assert settings.default_to_symbol == ""
