from fastapi import APIRouter
from typing import Dict, Any

from ..config import settings
from ..core.swap import get_session_registry
from ..services.tokens import TokenCatalogError, get_token_catalog

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint that verifies the token catalog is loadable"""

    try:
        token_count = len(get_token_catalog())
        catalog_status = {"status": "healthy", "tokens": token_count}
    except TokenCatalogError as e:
        token_count = 0
        catalog_status = {"status": "unavailable", "error": str(e)}

    return {
        "status": "healthy" if token_count >= 2 else "degraded",
        "catalog": catalog_status,
        "active_sessions": len(get_session_registry()),
        "slippage_percent": str(settings.slippage_percent),
        "max_balance": str(settings.max_balance),
        "settlement_delay_seconds": settings.settlement_delay_seconds,
    }
