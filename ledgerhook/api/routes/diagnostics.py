"""
ledgerhook.api.routes.diagnostics — Health, status and sample notifications
============================================================================
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from ledgerhook.api.deps import get_runtime, require_admin
from ledgerhook.constants import CATEGORY_GAMES, CATEGORY_REVENUE
from ledgerhook.engine.events import (
    CoinflipCreated,
    JackpotEntry,
    JackpotParticipant,
)
from ledgerhook.runtime import Runtime
from ledgerhook.services.embeds import build_coinflip_created, build_jackpot_entry
from ledgerhook.services.revenue_service import check_and_notify_revenue

router = APIRouter(tags=["diagnostics"])

SAMPLE_COINFLIP = CoinflipCreated(
    id="test-123", bet_amount=Decimal("10"), creator="0.0.1234567", creator_choice=0
)
SAMPLE_JACKPOT_ENTRY = JackpotEntry(
    participant_data=JackpotParticipant(
        username="TestPlayer",
        amount_entered=Decimal("5"),
        chance_percentage=Decimal("25"),
    ),
    current_pot=Decimal("100"),
    participant_count=4,
)


@router.get("/health")
def health(runtime: Runtime = Depends(get_runtime)):
    return {
        "status": "ok",
        "service": runtime.cfg.service_name,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/status")
def service_status(runtime: Runtime = Depends(get_runtime)):
    dispatcher = runtime.dispatcher
    return {
        "service": "running",
        "webhooks": {
            category: "configured" if dispatcher.webhook_for(category) else "missing"
            for category in (CATEGORY_GAMES, CATEGORY_REVENUE)
        },
        "dedup_entries": len(runtime.dedup),
        "pending_reconciliations": [p.bucket_key for p in runtime.debouncer.pending()],
    }


@router.post("/test/{kind}", dependencies=[Depends(require_admin)])
async def send_test_notification(kind: str, runtime: Runtime = Depends(get_runtime)):
    """Send a sample notification straight to the webhook (bypasses dedup)."""
    if kind == "coinflip":
        result = await runtime.dispatcher.dispatch(
            build_coinflip_created(SAMPLE_COINFLIP, runtime.cfg.links)
        )
        payload = {"status": str(result.status), "reason": result.reason}
    elif kind == "jackpot":
        result = await runtime.dispatcher.dispatch(
            build_jackpot_entry(SAMPLE_JACKPOT_ENTRY, runtime.cfg.links)
        )
        payload = {"status": str(result.status), "reason": result.reason}
    elif kind == "revenue":
        payload = (await check_and_notify_revenue(runtime, "Test")).to_dict()
    else:
        raise HTTPException(400, "Invalid test type")

    return {"success": True, "message": f"{kind} test notification sent", "result": payload}
