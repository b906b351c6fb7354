"""
tests/conftest.py — Shared Test Fixtures
=========================================

Every outbound HTTP call goes through ``httpx.MockTransport``: a fake
mirror node serving balances from a dict and a fake Discord webhook that
records posted embeds.  Clocks are injected so dedup / debounce windows are
driven by hand.
"""

from __future__ import annotations

import json

import httpx
import pytest

from ledgerhook.config import LedgerhookConfig
from ledgerhook.constants import CATEGORY_GAMES, CATEGORY_REVENUE
from ledgerhook.runtime import Runtime
from ledgerhook.services.balance_source import MirrorNodeBalanceSource
from ledgerhook.services.dispatcher import NotificationDispatcher

GAMES_URL = "https://discord.test/api/webhooks/games"
REVENUE_URL = "https://discord.test/api/webhooks/revenue"
MIRROR_URL = "https://mirror.test"

COINFLIP_WALLET = "0.0.9276566"
JACKPOT_WALLET = "0.0.9314288"


class FakeClock:
    """Manually advanced ``time.time`` replacement."""

    def __init__(self, start: float = 3000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMirrorNode:
    """Serves ``/api/v1/accounts/{id}`` from ``tinybars``.

    A value of ``"error"`` answers 500; a missing account answers 404.
    """

    def __init__(self) -> None:
        self.tinybars: dict[str, int | str] = {}
        self.requests: list[str] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        account_id = request.url.path.rsplit("/", 1)[-1]
        self.requests.append(account_id)
        value = self.tinybars.get(account_id)
        if value is None:
            return httpx.Response(404, json={"_status": {"messages": [{"message": "Not found"}]}})
        if value == "error":
            return httpx.Response(500, text="upstream exploded")
        return httpx.Response(200, json={"account": account_id, "balance": {"balance": value}})

    def set_hbar(self, **balances: int) -> None:
        """``set_hbar(coinflip=..., jackpot=...)`` in tinybars."""
        wallets = {"coinflip": COINFLIP_WALLET, "jackpot": JACKPOT_WALLET}
        for label, tinybars in balances.items():
            self.tinybars[wallets[label]] = tinybars


class FakeWebhook:
    """Records webhook posts; set ``status`` to make Discord fail."""

    def __init__(self) -> None:
        self.posts: list[tuple[str, dict]] = []
        self.status = 204

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.posts.append((str(request.url), json.loads(request.content)))
        return httpx.Response(self.status)

    @property
    def titles(self) -> list[str]:
        return [body["embeds"][0]["title"] for _, body in self.posts]


def make_config(**overrides) -> LedgerhookConfig:
    values = dict(
        service_name="Test Relay",
        mirror_node_url=MIRROR_URL,
        accounts={"coinflip": COINFLIP_WALLET, "jackpot": JACKPOT_WALLET},
        games_webhook_url=GAMES_URL,
        revenue_webhook_url=REVENUE_URL,
    )
    values.update(overrides)
    return LedgerhookConfig(**values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mirror() -> FakeMirrorNode:
    return FakeMirrorNode()


@pytest.fixture
def webhook() -> FakeWebhook:
    return FakeWebhook()


@pytest.fixture
def cfg() -> LedgerhookConfig:
    return make_config()


def build_runtime(cfg, mirror, webhook, clock) -> Runtime:
    source = MirrorNodeBalanceSource(
        cfg.mirror_node_url,
        client=httpx.AsyncClient(transport=httpx.MockTransport(mirror.handle)),
    )
    dispatcher = NotificationDispatcher(
        {CATEGORY_GAMES: cfg.games_webhook_url, CATEGORY_REVENUE: cfg.revenue_webhook_url},
        revenue_fallback=cfg.revenue_webhook_fallback,
        client=httpx.AsyncClient(transport=httpx.MockTransport(webhook.handle)),
    )
    return Runtime.build(cfg, source=source, dispatcher=dispatcher, clock=clock)


@pytest.fixture
def runtime(cfg, mirror, webhook, clock) -> Runtime:
    """A fully wired runtime talking only to the fakes above."""
    return build_runtime(cfg, mirror, webhook, clock)
