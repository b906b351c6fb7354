"""
ledgerhook.services.balance_source — Hedera mirror-node balance adapter
========================================================================

Reads an account's HBAR balance from the public mirror node REST API.

A read never raises: on timeout, HTTP error or an unexpected body the
configured ``fallback`` amount (zero by default) is returned and the
failure is logged, so one slow wallet cannot stall a reconciliation.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

import httpx

from ledgerhook.constants import TINYBARS_PER_HBAR

logger = logging.getLogger(__name__)

DEFAULT_MIRROR_NODE_URL = "https://mainnet-public.mirrornode.hedera.com"


class MirrorNodeBalanceSource:
    """``fetch(account_id) -> Decimal`` against ``/api/v1/accounts/{id}``."""

    def __init__(
        self,
        base_url: str = DEFAULT_MIRROR_NODE_URL,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        fallback: Decimal = Decimal("0"),
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.fallback = fallback
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, account_id: str) -> Decimal:
        url = f"{self.base_url}/api/v1/accounts/{account_id}"
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Error fetching balance for %s (%s); using fallback %s",
                account_id, exc, self.fallback,
            )
            return self.fallback

        balance = data.get("balance") if isinstance(data, dict) else None
        tinybars = balance.get("balance") if isinstance(balance, dict) else None
        if tinybars is None:
            logger.warning(
                "Mirror node returned no balance for %s; using fallback %s",
                account_id, self.fallback,
            )
            return self.fallback
        try:
            return Decimal(str(tinybars)) / TINYBARS_PER_HBAR
        except InvalidOperation:
            logger.warning(
                "Unparseable balance %r for %s; using fallback %s",
                tinybars, account_id, self.fallback,
            )
            return self.fallback

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
