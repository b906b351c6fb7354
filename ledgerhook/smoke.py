"""
ledgerhook.smoke — Send sample notifications to the configured webhooks
=======================================================================

Usage::

    python -m ledgerhook.smoke            # all samples, 2 s apart
    python -m ledgerhook.smoke coinflip
    python -m ledgerhook.smoke revenue
    python -m ledgerhook.smoke config

Samples go straight through the dispatcher (no dedup), so the command can be
re-run back to back.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from decimal import Decimal

from dotenv import load_dotenv

from ledgerhook.config import load_config
from ledgerhook.constants import CATEGORY_GAMES, CATEGORY_REVENUE
from ledgerhook.engine.events import (
    CoinflipCreated,
    CoinflipSettled,
    JackpotEntry,
    JackpotParticipant,
    JackpotWinner,
    Notification,
)
from ledgerhook.runtime import Runtime
from ledgerhook.services.dispatcher import DispatchStatus
from ledgerhook.services.embeds import (
    build_coinflip_created,
    build_coinflip_settled,
    build_jackpot_entry,
    build_jackpot_winner,
    fmt_fixed,
)
from ledgerhook.services.revenue_service import check_and_notify_revenue, current_stats

logger = logging.getLogger("ledgerhook.smoke")

PAUSE_SECONDS = 2.0

SAMPLES = {
    "coinflip": CoinflipCreated(
        id="test-coinflip-123",
        bet_amount=Decimal("10"),
        creator="0.0.1234567",
        creator_choice=0,
    ),
    "coinflip-settled": CoinflipSettled(
        game_id="test-coinflip-123",
        wager_amount=Decimal("10"),
        winner_id="0.0.1234567",
        winning_side="HEADS",
        challenged_by_bot=False,
        fee_charged=Decimal("0.3"),
    ),
    "jackpot-entry": JackpotEntry(
        participant_data=JackpotParticipant(
            username="TestPlayer",
            account_id="0.0.7654321",
            amount_entered=Decimal("5"),
            chance_percentage=Decimal("25"),
        ),
        current_pot=Decimal("100"),
        participant_count=4,
    ),
    "jackpot-winner": JackpotWinner(
        winner_username="LuckyPlayer",
        winner_id="0.0.9876543",
        prize_amount=Decimal("95"),
        win_chance=Decimal("30"),
        round_id="round-456",
        participant_count=6,
        total_pot=Decimal("100"),
    ),
}

COMMANDS = ("all", *SAMPLES, "revenue", "stats", "config")


def build_sample(kind: str, runtime: Runtime) -> Notification:
    links = runtime.cfg.links
    builders = {
        "coinflip": lambda: build_coinflip_created(SAMPLES["coinflip"], links),
        "coinflip-settled": lambda: build_coinflip_settled(SAMPLES["coinflip-settled"]),
        "jackpot-entry": lambda: build_jackpot_entry(SAMPLES["jackpot-entry"], links),
        "jackpot-winner": lambda: build_jackpot_winner(SAMPLES["jackpot-winner"]),
    }
    return builders[kind]()


async def send_sample(kind: str, runtime: Runtime) -> bool:
    result = await runtime.dispatcher.dispatch(build_sample(kind, runtime))
    if result.status is DispatchStatus.SENT:
        print(f"✅ {kind} notification sent")
        return True
    print(f"❌ {kind} notification {result.status}: {result.reason}")
    return False


async def run_revenue(runtime: Runtime, game_type: str = "Manual Test") -> bool:
    result = await check_and_notify_revenue(runtime, game_type)
    print(f"✅ Revenue check completed: {result.message}")
    print(
        f"   total={fmt_fixed(result.diff.current.total, 2)} "
        f"increase={fmt_fixed(result.increase, 4)} "
        f"notification_sent={result.notification_sent}"
    )
    return True


async def run_stats(runtime: Runtime) -> bool:
    snapshot = await current_stats(runtime)
    print("✅ Current revenue stats:")
    for label, account_id in runtime.cfg.accounts.items():
        amount = snapshot.per_account.get(account_id, Decimal("0"))
        print(f"   {label}: {fmt_fixed(amount, 2)} HBAR")
    print(f"   total: {fmt_fixed(snapshot.total, 2)} HBAR")
    return True


def check_configuration(runtime: Runtime) -> bool:
    games = runtime.cfg.games_webhook_url
    revenue = runtime.cfg.revenue_webhook_url
    print("📡 Webhook Configuration:")
    print(f"   Games webhook:   {'configured' if games else 'MISSING'}")
    if revenue:
        print("   Revenue webhook: configured")
    elif runtime.dispatcher.webhook_for(CATEGORY_REVENUE):
        print("   Revenue webhook: not configured (falls back to games)")
    else:
        print("   Revenue webhook: MISSING")
    if not runtime.dispatcher.webhook_for(CATEGORY_GAMES):
        print("❌ DISCORD_WEBHOOK_URL_GAMES is required")
        return False
    print("✅ Configuration check passed")
    return True


async def run(command: str, runtime: Runtime, *, pause: float = PAUSE_SECONDS) -> bool:
    try:
        if command == "config":
            return check_configuration(runtime)
        if command == "stats":
            return await run_stats(runtime)
        if command == "revenue":
            return await run_revenue(runtime)
        if command in SAMPLES:
            return await send_sample(command, runtime)

        ok = True
        for kind in SAMPLES:
            ok = await send_sample(kind, runtime) and ok
            await asyncio.sleep(pause)
        return await run_revenue(runtime, "Test") and ok
    finally:
        await runtime.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m ledgerhook.smoke",
        description="Send sample notifications to the configured Discord webhooks.",
    )
    parser.add_argument("command", nargs="?", default="all", choices=COMMANDS)
    parser.add_argument("--config", default=None, help="path to config.yaml")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)-8s │ %(name)s │ %(message)s")
    runtime = Runtime.build(load_config(args.config))
    return 0 if asyncio.run(run(args.command, runtime)) else 1


if __name__ == "__main__":
    sys.exit(main())
