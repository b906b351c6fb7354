"""
ledgerhook.services.dispatcher — Discord webhook delivery
=========================================================

Sends one rendered embed to the webhook configured for the notification's
category.  Exactly one attempt, bounded by a timeout; the caller decides
what a failure means (usually rolling back its dedup entry).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum

import httpx

from ledgerhook.constants import CATEGORY_GAMES, CATEGORY_REVENUE
from ledgerhook.engine.events import Notification
from ledgerhook.services.embeds import to_embed

logger = logging.getLogger(__name__)


class DispatchStatus(StrEnum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"
    DUPLICATE = "duplicate"  # set by the dedup gate, never by dispatch()


@dataclass(frozen=True, slots=True)
class DispatchResult:
    status: DispatchStatus
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not DispatchStatus.FAILED


class NotificationDispatcher:
    """Routes a :class:`Notification` to its category's Discord webhook."""

    def __init__(
        self,
        webhooks: dict[str, str | None],
        *,
        revenue_fallback: bool = True,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._webhooks = dict(webhooks)
        self._revenue_fallback = revenue_fallback
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def webhook_for(self, category: str) -> str | None:
        """Resolve the webhook URL; revenue may fall back to the games hook."""
        url = self._webhooks.get(category)
        if not url and category == CATEGORY_REVENUE and self._revenue_fallback:
            url = self._webhooks.get(CATEGORY_GAMES)
        return url or None

    async def dispatch(self, notification: Notification) -> DispatchResult:
        if (
            notification.category == CATEGORY_REVENUE
            and (notification.delta_total is None or notification.delta_total <= Decimal("0"))
        ):
            logger.info("No revenue increase detected, skipping notification")
            return DispatchResult(DispatchStatus.SKIPPED, "no revenue increase")

        url = self.webhook_for(notification.category)
        if not url:
            logger.warning(
                "Webhook URL not configured for type: %s", notification.category
            )
            return DispatchResult(
                DispatchStatus.SKIPPED,
                f"webhook not configured for {notification.category}",
            )

        payload = {"embeds": [to_embed(notification).to_dict()]}
        try:
            resp = await self._client.post(url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Failed to send %s notification %r: %s",
                notification.category, notification.title, exc,
            )
            return DispatchResult(DispatchStatus.FAILED, str(exc) or type(exc).__name__)

        logger.info(
            "%s notification sent: %s",
            notification.category.upper(), notification.title,
        )
        return DispatchResult(DispatchStatus.SENT)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
