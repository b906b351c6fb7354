"""
ledgerhook.services.notification_service — Dedup-gated delivery
===============================================================

The one path every outbound notification takes:

    dedup gate → dispatcher → rollback the dedup entry if the send failed

Rolling back on failure keeps the event eligible for a later attempt;
successful or skipped sends keep their entry for the rest of the window.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ledgerhook.constants import CATEGORY_REVENUE
from ledgerhook.engine.dedup import NotificationDeduplicator
from ledgerhook.engine.events import Notification
from ledgerhook.services.dispatcher import (
    DispatchResult,
    DispatchStatus,
    NotificationDispatcher,
)

logger = logging.getLogger(__name__)


async def send_notification(
    dedup: NotificationDeduplicator,
    dispatcher: NotificationDispatcher,
    notification: Notification,
) -> DispatchResult:
    """Deliver *notification* once per dedup window."""
    if notification.category == CATEGORY_REVENUE and (
        notification.delta_total is None or notification.delta_total <= Decimal("0")
    ):
        # Never worth a dedup slot.
        return DispatchResult(DispatchStatus.SKIPPED, "no revenue increase")

    if dedup.should_suppress(notification.key):
        return DispatchResult(DispatchStatus.DUPLICATE, "duplicate within dedup window")

    result = await dispatcher.dispatch(notification)
    if result.status is DispatchStatus.FAILED:
        dedup.mark_failed(notification.key)
    return result
