from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]
PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        env_prefix="SWAPFORM_",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Keep the default pair distinct even when overridden from the environment."""

        super().model_post_init(__context)

        if self.default_from_symbol.upper() == self.default_to_symbol.upper():
            object.__setattr__(self, "default_to_symbol", "")

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Swap Engine
    slippage_rate: Decimal = Field(
        default=Decimal("0.003"),
        ge=0,
        lt=1,
        description="Fractional discount applied to the theoretical exchange rate",
    )
    max_balance: Decimal = Field(
        default=Decimal("1000"),
        gt=0,
        description="Maximum amount of the source asset a user may send",
    )
    settlement_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        validation_alias=AliasChoices(
            "settlement_delay_seconds",
            "SWAPFORM_SETTLEMENT_DELAY_SECONDS",
            "SWAPFORM_SETTLEMENT_DELAY",
        ),
        description="Delay before a simulated settlement completes",
    )
    transition_history_limit: int = Field(
        default=100,
        ge=1,
        description="Transitions kept in memory per swap session",
    )
    max_sessions: int = Field(
        default=1000,
        ge=1,
        description="Swap sessions kept in memory; the oldest idle one is evicted first",
    )

    # Token Catalog
    token_list_path: Path = Field(
        default=PACKAGE_DIR / "data" / "prices.json",
        description="JSON price snapshot loaded once at startup",
    )
    token_icons_url: str = Field(
        default="https://raw.githubusercontent.com/Switcheo/token-icons/main/tokens",
        description="Base URL for token icons; '<SYMBOL>.svg' is appended",
    )
    fallback_icon_url: str = Field(
        default="https://placehold.co/64x64/2563eb/ffffff?text=?",
        description="Icon shown when a token icon fails to load",
    )
    default_from_symbol: str = Field(default="ETH", description="Asset selected on the send side at start")
    default_to_symbol: str = Field(default="USDC", description="Asset selected on the receive side at start")

    # Token Picker
    search_debounce_seconds: float = Field(
        default=0.3,
        ge=0,
        description="Quiet period before a token search query is applied",
    )

    # Display
    success_message_ttl_seconds: int = Field(
        default=5,
        ge=0,
        description="How long clients should show the settlement success message",
    )

    @property
    def slippage_percent(self) -> Decimal:
        return self.slippage_rate * 100

    @property
    def has_token_list(self) -> bool:
        return self.token_list_path.is_file()


# Global settings instance
settings = Settings()
