"""
ledgerhook.engine.debounce — Time-bucketed reconciliation debouncer
====================================================================

Game settlements arrive in bursts.  Each burst should produce a single
ledger reconciliation, and only after the ledger has had time to settle.

How it works:
    1. ``bucket_key = f"{category}-{floor(now / granularity)}"``.
    2. If that key is already pending, the trigger is coalesced (no-op).
    3. Otherwise the key is recorded and the action is scheduled on its own
       task after ``delay`` seconds.
    4. When the action finishes (either way) the key is dropped, so a later
       bucket is never blocked by a stale entry.

Failures inside the action are logged and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ledgerhook.engine.dedup import time_bucket

logger = logging.getLogger(__name__)

_CATEGORY_RE = re.compile(r"[A-Za-z0-9_ -]{1,64}")

ReconcileAction = Callable[[str], Awaitable[object]]


@dataclass(frozen=True, slots=True)
class PendingReconciliation:
    bucket_key: str
    category: str
    scheduled_at: float


class ReconciliationDebouncer:
    """Coalesces triggers into at most one pending action per (category, bucket)."""

    def __init__(
        self,
        action: ReconcileAction,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._action = action
        self._clock = clock
        self._pending: dict[str, PendingReconciliation] = {}
        self._tasks: set[asyncio.Task] = set()
        self._lock = threading.Lock()

    def pending(self) -> list[PendingReconciliation]:
        with self._lock:
            return list(self._pending.values())

    def trigger(self, category: str, bucket_granularity: float, delay: float) -> bool:
        """Schedule a reconciliation for *category* unless one is already pending.

        Returns True when a new action was scheduled, False when coalesced.
        Must be called from a running event loop.

        Raises
        ------
        ValueError
            If *category* is malformed, *bucket_granularity* is not positive,
            or *delay* is negative.  Shared state is untouched.
        """
        if not isinstance(category, str) or not _CATEGORY_RE.fullmatch(category):
            raise ValueError(f"Malformed trigger category: {category!r}")
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")

        now = self._clock()
        bucket_key = f"{category}-{time_bucket(bucket_granularity, now)}"
        loop = asyncio.get_running_loop()

        with self._lock:
            if bucket_key in self._pending:
                logger.info(
                    "Reconciliation already scheduled for %s (%s), skipping duplicate",
                    category, bucket_key,
                )
                return False
            self._pending[bucket_key] = PendingReconciliation(
                bucket_key=bucket_key, category=category, scheduled_at=now
            )

        task = loop.create_task(
            self._run_later(bucket_key, category, delay),
            name=f"reconcile-{bucket_key}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("Scheduled reconciliation for %s in %.1fs", category, delay)
        return True

    async def _run_later(self, bucket_key: str, category: str, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
            await self._action(category)
        except asyncio.CancelledError:
            logger.info("Scheduled reconciliation %s cancelled", bucket_key)
            raise
        except Exception:
            logger.exception("Error in scheduled reconciliation for %s", category)
        finally:
            with self._lock:
                self._pending.pop(bucket_key, None)

    async def wait_idle(self) -> None:
        """Wait for every scheduled action to finish (used on shutdown and in tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel outstanding actions and forget their pending entries."""
        for task in list(self._tasks):
            task.cancel()
        # A task cancelled before its first step never reaches its finally.
        with self._lock:
            self._pending.clear()
