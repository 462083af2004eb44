"""Service layer helpers"""

from .token_search import DebouncedTokenSearch, filter_assets, selectable_assets
from .tokens import (
    TokenCatalog,
    TokenCatalogError,
    get_token_catalog,
    load_token_catalog,
    set_token_catalog,
)

__all__ = [
    "DebouncedTokenSearch",
    "filter_assets",
    "selectable_assets",
    "TokenCatalog",
    "TokenCatalogError",
    "get_token_catalog",
    "load_token_catalog",
    "set_token_catalog",
]
