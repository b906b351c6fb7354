"""
ledgerhook.engine.snapshot — Rolling balance snapshot
======================================================

Holds the last-observed balance of every tracked wallet and diffs a fresh
reading against it.

How it works:
    1. Fetch every tracked account concurrently (join-all; the balance
       source already degrades a failed read to zero).
    2. If no baseline exists yet, store the reading and report
       ``is_baseline=True`` with a zero delta.  A first observation is never
       reported as revenue.
    3. Otherwise compute ``current - previous`` per account and in total,
       then replace the stored snapshot in one step.

Amounts are :class:`~decimal.Decimal` end to end.  Rounding happens only when
an embed is rendered.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from types import MappingProxyType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

FetchBalance = Callable[[str], Awaitable[Decimal]]


@dataclass(frozen=True, slots=True)
class BalanceSnapshot:
    """Balances per tracked account, their total, and when they were read.

    ``observed_at is None`` means no baseline has been taken yet.
    """

    per_account: Mapping[str, Decimal] = field(
        default_factory=lambda: MappingProxyType({})
    )
    total: Decimal = ZERO
    observed_at: datetime | None = None

    @classmethod
    def empty(cls, account_ids: Iterable[str] = ()) -> BalanceSnapshot:
        return cls(per_account=MappingProxyType({a: ZERO for a in account_ids}))

    @classmethod
    def from_amounts(
        cls, amounts: Mapping[str, Decimal], observed_at: datetime
    ) -> BalanceSnapshot:
        frozen = MappingProxyType(dict(amounts))
        return cls(
            per_account=frozen,
            total=sum(frozen.values(), ZERO),
            observed_at=observed_at,
        )

    @property
    def is_sentinel(self) -> bool:
        return self.observed_at is None

    def to_dict(self) -> dict:
        return {
            "per_account": {k: str(v) for k, v in self.per_account.items()},
            "total": str(self.total),
            "observed_at": self.observed_at.isoformat() if self.observed_at else None,
        }


@dataclass(frozen=True, slots=True)
class DiffResult:
    previous: BalanceSnapshot
    current: BalanceSnapshot
    delta_per_account: Mapping[str, Decimal]
    delta_total: Decimal
    is_baseline: bool


class SnapshotTracker:
    """Owns the stored :class:`BalanceSnapshot` and computes deltas.

    The stored snapshot is only ever swapped whole under ``_lock``; the
    network fan-out happens outside the lock.  Two overlapping refreshes are
    each a full independent read, so last-writer-wins is acceptable.
    """

    def __init__(
        self,
        fetch: FetchBalance,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._fetch = fetch
        self._clock = clock or (lambda: datetime.now(UTC))
        self._lock = threading.Lock()
        self._snapshot = BalanceSnapshot.empty()

    # -- reads ---------------------------------------------------------------
    def last_snapshot(self) -> BalanceSnapshot:
        with self._lock:
            return self._snapshot

    async def read_current(self, account_ids: Iterable[str]) -> BalanceSnapshot:
        """Fetch every account concurrently without touching stored state."""
        ids = list(dict.fromkeys(account_ids))
        results = await asyncio.gather(
            *(self._fetch(acct) for acct in ids), return_exceptions=True
        )
        amounts: dict[str, Decimal] = {}
        for acct, result in zip(ids, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Balance fetch for %s raised %r; counting it as zero",
                    acct, result,
                )
                amounts[acct] = ZERO
            else:
                amounts[acct] = Decimal(result)
        return BalanceSnapshot.from_amounts(amounts, self._clock())

    # -- mutations -----------------------------------------------------------
    async def refresh_and_diff(self, account_ids: Iterable[str]) -> DiffResult:
        """Read all *account_ids*, diff against the stored snapshot, replace it."""
        current = await self.read_current(account_ids)

        with self._lock:
            previous = self._snapshot
            self._snapshot = current

        if previous.is_sentinel:
            logger.info(
                "Baseline established: total=%s across %d accounts",
                current.total, len(current.per_account),
            )
            return DiffResult(
                previous=previous,
                current=current,
                delta_per_account=MappingProxyType(
                    {acct: ZERO for acct in current.per_account}
                ),
                delta_total=ZERO,
                is_baseline=True,
            )

        deltas = {
            acct: amount - previous.per_account.get(acct, ZERO)
            for acct, amount in current.per_account.items()
        }
        delta_total = current.total - previous.total
        logger.info(
            "Balance diff: previous=%s current=%s delta=%s",
            previous.total, current.total, delta_total,
        )
        return DiffResult(
            previous=previous,
            current=current,
            delta_per_account=MappingProxyType(deltas),
            delta_total=delta_total,
            is_baseline=False,
        )

    def reset(self) -> None:
        """Drop the baseline; the next refresh becomes a new baseline."""
        with self._lock:
            self._snapshot = BalanceSnapshot.empty()
        logger.info("Snapshot tracker reset to baseline-pending state")
