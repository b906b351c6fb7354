"""
ledgerhook.api.routes.revenue — Revenue admin endpoints
=======================================================

Admin-guarded routes for:
    - Forcing an immediate (non-debounced) reconciliation
    - Reading live wallet balances
    - Inspecting / resetting the stored snapshot
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ledgerhook.api.deps import get_runtime, require_admin
from ledgerhook.runtime import Runtime
from ledgerhook.services.revenue_service import check_and_notify_revenue, current_stats

router = APIRouter(tags=["revenue"], dependencies=[Depends(require_admin)])


class RevenueCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    game_type: str = Field(
        default="Manual", alias="gameType", min_length=1, max_length=64
    )


class RevenueResponse(BaseModel):
    success: bool = True
    result: dict[str, Any]


@router.post("/notify/revenue/check", response_model=RevenueResponse)
async def revenue_check(
    body: RevenueCheckRequest | None = None,
    runtime: Runtime = Depends(get_runtime),
):
    game_type = body.game_type if body else "Manual"
    result = await check_and_notify_revenue(runtime, game_type)
    return RevenueResponse(result=result.to_dict())


@router.get("/revenue/stats", response_model=RevenueResponse)
async def revenue_stats(runtime: Runtime = Depends(get_runtime)):
    snapshot = await current_stats(runtime)
    return RevenueResponse(
        result={**snapshot.to_dict(), "wallets": dict(runtime.cfg.accounts)}
    )


@router.get("/revenue/snapshot", response_model=RevenueResponse)
def revenue_snapshot(runtime: Runtime = Depends(get_runtime)):
    return RevenueResponse(result=runtime.tracker.last_snapshot().to_dict())


@router.post("/revenue/reset", response_model=RevenueResponse)
def revenue_reset(runtime: Runtime = Depends(get_runtime)):
    runtime.tracker.reset()
    return RevenueResponse(result={"message": "Snapshot reset; next check sets a new baseline"})
