from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel
from typing import List, Optional

from ..services.token_search import filter_assets, selectable_assets
from ..services.tokens import get_token_catalog


router = APIRouter()


class TokenModel(BaseModel):
    symbol: str
    name: str
    priceUsd: Optional[str] = None
    iconUrl: Optional[str] = None
    fallbackIconUrl: Optional[str] = None


@router.get("/tokens", response_model=List[TokenModel])
async def list_tokens(
    query: Optional[str] = Query(None, description="Case-insensitive match on symbol or name"),
    exclude: Optional[str] = Query(None, description="Symbol hidden from the list (the other side of the pair)"),
):
    catalog = get_token_catalog()
    excluded = None
    if exclude:
        excluded = catalog.get(exclude)
        if excluded is None:
            raise HTTPException(status_code=404, detail=f"Unknown token: {exclude}")
    assets = filter_assets(selectable_assets(catalog.assets, excluded), query)
    return [asset.to_dict() for asset in assets]
