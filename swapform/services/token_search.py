"""Token picker search: substring filtering and a debounced query helper."""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

from ..config import settings
from ..core.swap.models import Asset


def selectable_assets(assets: Iterable[Asset], exclude: Optional[Asset] = None) -> List[Asset]:
    """Assets offered by a picker; the asset on the opposite side is hidden."""
    return [asset for asset in assets if exclude is None or asset != exclude]


def filter_assets(assets: Iterable[Asset], query: Optional[str]) -> List[Asset]:
    """Case-insensitive substring match on symbol or name."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(assets)
    return [
        asset
        for asset in assets
        if needle in asset.symbol.lower() or needle in asset.name.lower()
    ]


class DebouncedTokenSearch:
    """Applies a query only once it has stopped changing for ``delay_seconds``.

    The latest query string is the only shared state; it never touches the
    swap form.
    """

    def __init__(self, assets: Iterable[Asset], delay_seconds: Optional[float] = None):
        self.assets = list(assets)
        self.delay_seconds = settings.search_debounce_seconds if delay_seconds is None else delay_seconds
        self._query = ""

    @property
    def query(self) -> str:
        return self._query

    def reset(self) -> None:
        self._query = ""

    async def search(self, query: str) -> Optional[List[Asset]]:
        """Results for ``query``, or None if a newer query superseded it."""
        self._query = query
        await asyncio.sleep(self.delay_seconds)
        if self._query != query:
            return None
        return filter_assets(self.assets, query)
