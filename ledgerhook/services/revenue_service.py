"""
ledgerhook.services.revenue_service — Revenue reconciliation
============================================================

The action behind every debounced (or forced) reconciliation.

How it works:
    1. Refresh the balance snapshot of all tracked wallets.
    2. A baseline refresh reports nothing.
    3. If the total grew by at least ``revenue_threshold``, build the revenue
       embed (dedup key bucketed by ``revenue_dedup_bucket_seconds``) and
       send it through the dedup gate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from ledgerhook.engine.dedup import time_bucket
from ledgerhook.engine.snapshot import BalanceSnapshot, DiffResult
from ledgerhook.services.dispatcher import DispatchStatus
from ledgerhook.services.embeds import build_revenue_update
from ledgerhook.services.notification_service import send_notification

if TYPE_CHECKING:
    from ledgerhook.runtime import Runtime

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RevenueCheckResult:
    message: str
    diff: DiffResult
    notification_sent: bool = False
    dispatch_status: str | None = None

    @property
    def increase(self) -> Decimal:
        return self.diff.delta_total

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "stats": self.diff.current.to_dict(),
            "increase": str(self.diff.delta_total),
            "notification_sent": self.notification_sent,
            "dispatch_status": self.dispatch_status,
            "is_baseline": self.diff.is_baseline,
            "breakdown": {k: str(v) for k, v in self.diff.delta_per_account.items()},
        }


async def current_stats(runtime: Runtime) -> BalanceSnapshot:
    """Read live balances without moving the stored baseline."""
    return await runtime.tracker.read_current(runtime.cfg.accounts.values())


async def check_and_notify_revenue(
    runtime: Runtime, game_type: str = "Unknown"
) -> RevenueCheckResult:
    """Refresh balances and announce a revenue increase if there is one."""
    cfg = runtime.cfg
    logger.info("Checking revenue after %s event...", game_type)

    diff = await runtime.tracker.refresh_and_diff(cfg.accounts.values())
    if diff.is_baseline:
        return RevenueCheckResult(message="Baseline established", diff=diff)

    if diff.delta_total < cfg.revenue_threshold:
        logger.info(
            "No significant revenue increase detected (%s HBAR)", diff.delta_total,
        )
        return RevenueCheckResult(message="No significant revenue change", diff=diff)

    logger.info("Revenue increased by %s HBAR, sending notification...", diff.delta_total)
    notification = build_revenue_update(
        game_type,
        diff,
        cfg.accounts,
        bucket=time_bucket(cfg.revenue_dedup_bucket_seconds, runtime.clock()),
    )
    result = await send_notification(runtime.dedup, runtime.dispatcher, notification)
    sent = result.status is DispatchStatus.SENT
    if sent:
        message = "Revenue increase detected and notification sent"
    else:
        message = f"Revenue increase detected, notification {result.status}"
        logger.warning("Revenue notification not sent: %s %s", result.status, result.reason)

    return RevenueCheckResult(
        message=message,
        diff=diff,
        notification_sent=sent,
        dispatch_status=str(result.status),
    )
