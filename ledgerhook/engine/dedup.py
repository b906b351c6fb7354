"""
ledgerhook.engine.dedup — Trailing-window notification deduplicator
====================================================================

Suppresses a notification whose :class:`NotificationKey` was accepted within
the last ``window`` seconds.  Expired keys are swept lazily on every check,
so the map only ever holds live entries.

A send that fails after the key was accepted must call :meth:`mark_failed`
so the same logical event can be retried without being treated as a
duplicate.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ledgerhook.engine.events import NotificationKey

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 30.0


@dataclass(frozen=True, slots=True)
class DedupEntry:
    key: NotificationKey
    accepted_at: float


def time_bucket(granularity: float, now: float | None = None) -> int:
    """Index of the fixed-width bucket that *now* falls into."""
    if granularity <= 0:
        raise ValueError(f"bucket granularity must be positive, got {granularity}")
    return math.floor((time.time() if now is None else now) / granularity)


class NotificationDeduplicator:
    """Check-and-record dedup gate with lazy expiry.

    - A key is suppressed while it was accepted less than ``window`` seconds ago.
    - Every call first evicts entries older than the window.
    """

    def __init__(
        self,
        window: float = DEFAULT_WINDOW,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if window <= 0:
            raise ValueError(f"dedup window must be positive, got {window}")
        self.window = window
        self._clock = clock
        self._entries: dict[NotificationKey, DedupEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window
        expired = [k for k, e in self._entries.items() if e.accepted_at <= cutoff]
        for k in expired:
            del self._entries[k]

    def should_suppress(self, key: NotificationKey) -> bool:
        """Return True if *key* is a duplicate; otherwise record it and return False."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if key in self._entries:
                logger.info("Duplicate notification suppressed: %s", key)
                return True
            self._entries[key] = DedupEntry(key=key, accepted_at=now)
            return False

    def mark_failed(self, key: NotificationKey) -> None:
        """Forget *key* so a retry of the same event is not seen as a duplicate."""
        with self._lock:
            if self._entries.pop(key, None) is not None:
                logger.info("Dedup entry rolled back after failed send: %s", key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
