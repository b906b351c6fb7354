"""
ledgerhook.api.routes.notify — Game event notification endpoints
================================================================

Called by the game backend:
    - coinflip created / settled
    - jackpot entry / winner

Settlement events also schedule a debounced revenue reconciliation.  The
caller only learns that the check was scheduled (or coalesced), never its
outcome.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ledgerhook.api.deps import get_runtime
from ledgerhook.engine.events import (
    CoinflipCreated,
    CoinflipSettled,
    JackpotEntry,
    JackpotWinner,
)
from ledgerhook.runtime import Runtime
from ledgerhook.services.dispatcher import DispatchResult, DispatchStatus
from ledgerhook.services.embeds import (
    build_coinflip_created,
    build_coinflip_settled,
    build_jackpot_entry,
    build_jackpot_winner,
)
from ledgerhook.services.notification_service import send_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notify", tags=["notify"])


class NotifyResponse(BaseModel):
    success: bool
    status: str
    message: str
    revenue_check_scheduled: bool | None = None


def _respond(
    result: DispatchResult, label: str, *, scheduled: bool | None = None
) -> NotifyResponse | JSONResponse:
    if result.status is DispatchStatus.FAILED:
        return JSONResponse(
            status_code=502,
            content={"success": False, "error": result.reason},
        )
    message = {
        DispatchStatus.SENT: f"{label} notification sent",
        DispatchStatus.DUPLICATE: f"{label} notification already sent",
        DispatchStatus.SKIPPED: f"{label} notification skipped: {result.reason}",
    }[result.status]
    return NotifyResponse(
        success=True,
        status=str(result.status),
        message=message,
        revenue_check_scheduled=scheduled,
    )


@router.post("/coinflip/created", response_model=NotifyResponse)
async def coinflip_created(
    body: CoinflipCreated, runtime: Runtime = Depends(get_runtime)
):
    notification = build_coinflip_created(body, runtime.cfg.links)
    result = await send_notification(runtime.dedup, runtime.dispatcher, notification)
    return _respond(result, "Coinflip creation")


@router.post("/coinflip/settled", response_model=NotifyResponse)
async def coinflip_settled(
    body: CoinflipSettled, runtime: Runtime = Depends(get_runtime)
):
    notification = build_coinflip_settled(body)
    result = await send_notification(runtime.dedup, runtime.dispatcher, notification)
    # Fees landed on-chain whether or not Discord accepted the embed.
    scheduled = runtime.schedule_revenue_check("Coinflip", runtime.cfg.coinflip_check_delay)
    return _respond(result, "Coinflip settlement", scheduled=scheduled)


@router.post("/jackpot/entry", response_model=NotifyResponse)
async def jackpot_entry(
    body: JackpotEntry, runtime: Runtime = Depends(get_runtime)
):
    notification = build_jackpot_entry(body, runtime.cfg.links)
    result = await send_notification(runtime.dedup, runtime.dispatcher, notification)
    return _respond(result, "Jackpot entry")


@router.post("/jackpot/winner", response_model=NotifyResponse)
async def jackpot_winner(
    body: JackpotWinner, runtime: Runtime = Depends(get_runtime)
):
    notification = build_jackpot_winner(body)
    result = await send_notification(runtime.dedup, runtime.dispatcher, notification)
    scheduled = runtime.schedule_revenue_check("Jackpot", runtime.cfg.jackpot_check_delay)
    return _respond(result, "Jackpot winner", scheduled=scheduled)
