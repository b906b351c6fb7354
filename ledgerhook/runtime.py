"""
ledgerhook.runtime — Owned state for one running relay
======================================================

Everything with state (snapshot, dedup map, pending reconciliations) and
every outbound client hangs off one :class:`Runtime`.  The API stores it on
``app.state.runtime``; the smoke CLI builds its own.  Nothing here is a
module-level global, so tests build as many independent runtimes as they
like.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ledgerhook.config import LedgerhookConfig
from ledgerhook.constants import CATEGORY_GAMES, CATEGORY_REVENUE
from ledgerhook.engine.debounce import ReconciliationDebouncer
from ledgerhook.engine.dedup import NotificationDeduplicator
from ledgerhook.engine.snapshot import SnapshotTracker
from ledgerhook.services.balance_source import MirrorNodeBalanceSource
from ledgerhook.services.dispatcher import NotificationDispatcher
from ledgerhook.services.revenue_service import check_and_notify_revenue

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    cfg: LedgerhookConfig
    source: MirrorNodeBalanceSource
    dispatcher: NotificationDispatcher
    tracker: SnapshotTracker
    dedup: NotificationDeduplicator
    clock: Callable[[], float] = time.time
    debouncer: ReconciliationDebouncer = field(init=False)

    @classmethod
    def build(
        cls,
        cfg: LedgerhookConfig,
        *,
        source: MirrorNodeBalanceSource | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> Runtime:
        """Wire the components from *cfg*; collaborators may be injected."""
        source = source or MirrorNodeBalanceSource(
            cfg.mirror_node_url, timeout=cfg.http_timeout
        )
        dispatcher = dispatcher or NotificationDispatcher(
            {
                CATEGORY_GAMES: cfg.games_webhook_url,
                CATEGORY_REVENUE: cfg.revenue_webhook_url,
            },
            revenue_fallback=cfg.revenue_webhook_fallback,
            timeout=cfg.http_timeout,
        )
        runtime = cls(
            cfg=cfg,
            source=source,
            dispatcher=dispatcher,
            tracker=SnapshotTracker(source.fetch),
            dedup=NotificationDeduplicator(cfg.dedup_window_seconds, clock=clock),
            clock=clock,
        )

        async def _reconcile(category: str) -> None:
            await check_and_notify_revenue(runtime, category)

        runtime.debouncer = ReconciliationDebouncer(_reconcile, clock=clock)
        return runtime

    def schedule_revenue_check(self, game_type: str, delay: float) -> bool:
        """Debounced reconciliation after a settlement event."""
        return self.debouncer.trigger(
            game_type, self.cfg.debounce_bucket_seconds, delay
        )

    async def aclose(self) -> None:
        self.debouncer.close()
        await self.source.aclose()
        await self.dispatcher.aclose()
        logger.info("Runtime closed")
