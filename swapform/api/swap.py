from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from ..core.swap import (
    DrivingField,
    FieldLockedError,
    SubmissionRejected,
    SwapSession,
    UnknownAssetError,
    get_session_registry,
)
from ..services.tokens import get_token_catalog


router = APIRouter(prefix="/swap")


class CreateSessionRequest(BaseModel):
    from_symbol: Optional[str] = Field(default=None, description="Initial asset to send (defaults to ETH)")
    to_symbol: Optional[str] = Field(default=None, description="Initial asset to receive (defaults to USDC)")


class AmountEditRequest(BaseModel):
    field: Literal["from", "to"] = Field(description="Which amount the user typed into")
    value: str = Field(default="", description="Raw text of the field; cleaned server-side")


class AssetSelectRequest(BaseModel):
    side: Literal["from", "to"] = Field(description="Which side of the pair to change")
    symbol: str = Field(description="Symbol of the asset picked from the catalog")


class SwapTransitionModel(BaseModel):
    id: str
    trigger: str
    fromDriving: str
    toDriving: str
    timestamp: str
    detail: Dict[str, Any] = {}


def _session_or_404(session_id: str) -> SwapSession:
    session = get_session_registry().get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Swap session not found")
    return session


@router.post("/sessions", status_code=201)
async def create_session(req: Optional[CreateSessionRequest] = None) -> Dict[str, Any]:
    req = req or CreateSessionRequest()
    session = get_session_registry().create(
        get_token_catalog().assets,
        from_symbol=req.from_symbol,
        to_symbol=req.to_symbol,
    )
    return session.controller.snapshot()


@router.get("/sessions/{session_id}")
async def get_session(session_id: str) -> Dict[str, Any]:
    return _session_or_404(session_id).controller.snapshot()


@router.get("/sessions/{session_id}/history", response_model=List[SwapTransitionModel])
async def get_session_history(session_id: str):
    controller = _session_or_404(session_id).controller
    return [transition.to_dict() for transition in controller.history]


@router.post("/sessions/{session_id}/amount")
async def edit_amount(session_id: str, req: AmountEditRequest) -> Dict[str, Any]:
    controller = _session_or_404(session_id).controller
    try:
        controller.edit(DrivingField(req.field), req.value)
    except FieldLockedError as e:
        raise HTTPException(status_code=409, detail=e.to_dict())
    return controller.snapshot()


@router.post("/sessions/{session_id}/asset")
async def select_asset(session_id: str, req: AssetSelectRequest) -> Dict[str, Any]:
    controller = _session_or_404(session_id).controller
    try:
        controller.select(DrivingField(req.side), req.symbol)
    except UnknownAssetError as e:
        raise HTTPException(status_code=404, detail=e.to_dict())
    return controller.snapshot()


@router.post("/sessions/{session_id}/reverse")
async def reverse_pair(session_id: str) -> Dict[str, Any]:
    controller = _session_or_404(session_id).controller
    controller.reverse()
    return controller.snapshot()


@router.post("/sessions/{session_id}/submit", status_code=202)
async def submit_swap(
    session_id: str,
    response: Response,
    wait: bool = Query(False, description="Block until the simulated settlement finishes"),
) -> Dict[str, Any]:
    session = _session_or_404(session_id)
    try:
        session.simulator.submit()
    except SubmissionRejected as e:
        raise HTTPException(status_code=409, detail=e.to_dict())

    if wait:
        await session.simulator.wait()
        response.status_code = 200
    return session.controller.snapshot()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str) -> Response:
    if not get_session_registry().remove(session_id):
        raise HTTPException(status_code=404, detail="Swap session not found")
    return Response(status_code=204)
