"""
Token catalog service - loads the static price snapshot.

The catalog is read once and treated as immutable for the rest of the
process. Entries are keyed by currency: a currency listed more than once
keeps its first position and takes the price of its last entry.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..config import settings
from ..core.swap.models import Asset

logger = logging.getLogger(__name__)


class TokenCatalogError(Exception):
    """Raised when the price snapshot cannot be read."""


def build_icon_url(symbol: str, base_url: Optional[str] = None) -> str:
    base = (base_url if base_url is not None else settings.token_icons_url).rstrip("/")
    return f"{base}/{symbol}.svg"


def parse_price_entries(
    entries: Iterable[Dict[str, Any]],
    icons_url: Optional[str] = None,
) -> List[Asset]:
    """Turn raw ``{currency, price}`` rows into a de-duplicated asset list."""
    prices: Dict[str, Optional[Decimal]] = {}
    for entry in entries:
        symbol = str(entry.get("currency") or "").strip()
        if not symbol:
            logger.warning(f"Skipping price entry without currency: {entry!r}")
            continue
        raw_price = entry.get("price")
        prices[symbol] = Decimal(str(raw_price)) if raw_price is not None else None

    return [
        Asset(
            symbol=symbol,
            price_usd=price,
            name=symbol,
            icon_url=build_icon_url(symbol, icons_url),
        )
        for symbol, price in prices.items()
    ]


def load_token_catalog(path: Optional[Union[str, Path]] = None) -> List[Asset]:
    """Read the price snapshot at ``path`` (default: settings.token_list_path)."""
    source = Path(path) if path is not None else settings.token_list_path
    try:
        with source.open("r", encoding="utf-8") as fh:
            raw = json.load(fh, parse_float=Decimal)
    except (OSError, json.JSONDecodeError) as e:
        raise TokenCatalogError(f"Failed to load token list from {source}: {e}") from e

    if not isinstance(raw, list):
        raise TokenCatalogError(f"Token list at {source} must be a JSON array")

    assets = parse_price_entries(raw)
    logger.info(f"Loaded {len(assets)} tokens from {source}")
    return assets


class TokenCatalog:
    """Canonical, ordered list of assets available to the swap form."""

    def __init__(self, assets: Iterable[Asset]):
        self._assets: Tuple[Asset, ...] = tuple(assets)
        self._by_symbol: Dict[str, Asset] = {a.symbol.upper(): a for a in self._assets}

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "TokenCatalog":
        return cls(load_token_catalog(path))

    @property
    def assets(self) -> List[Asset]:
        return list(self._assets)

    def get(self, symbol: str) -> Optional[Asset]:
        return self._by_symbol.get((symbol or "").strip().upper())

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.get(symbol) is not None

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self):
        return iter(self._assets)


_catalog: Optional[TokenCatalog] = None


def get_token_catalog() -> TokenCatalog:
    """Process-wide catalog, loaded on first use."""
    global _catalog
    if _catalog is None:
        _catalog = TokenCatalog.from_file()
    return _catalog


def set_token_catalog(catalog: Optional[TokenCatalog]) -> None:
    """Replace the process-wide catalog (None forces a reload on next use)."""
    global _catalog
    _catalog = catalog
