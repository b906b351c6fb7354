"""
tests/test_embeds.py — Notification builders
=============================================

Dedup keys come from event ids (never from field labels), payload parsing
accepts the backend's camelCase JSON, and amounts are rounded only here.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from types import MappingProxyType

import discord

from ledgerhook.constants import CATEGORY_GAMES, CATEGORY_REVENUE, FOOTER_TEXT
from ledgerhook.engine.events import (
    CoinflipCreated,
    CoinflipSettled,
    JackpotEntry,
    JackpotWinner,
)
from ledgerhook.engine.snapshot import BalanceSnapshot, DiffResult
from ledgerhook.services.embeds import (
    build_coinflip_created,
    build_coinflip_settled,
    build_jackpot_entry,
    build_jackpot_winner,
    build_revenue_update,
    fmt_amount,
    fmt_fixed,
    to_embed,
)


def _fields(notification) -> dict[str, str]:
    return {f.name: f.value for f in notification.fields}


class TestPayloads:
    def test_camel_case_body_is_accepted(self):
        game = CoinflipCreated.model_validate(
            {"id": "cf-1", "betAmount": 10, "creator": "0.0.5", "creatorChoice": 1}
        )
        assert game.bet_amount == Decimal("10")
        assert game.creator_choice == 1

    def test_nested_jackpot_entry(self):
        entry = JackpotEntry.model_validate({
            "participantData": {"username": "TestPlayer", "amountEntered": 5, "chancePercentage": 25},
            "currentPot": 100,
            "participantCount": 4,
        })
        assert entry.participant_data.display_name == "TestPlayer"


class TestGameNotifications:
    def test_coinflip_created_key_uses_game_id(self):
        n = build_coinflip_created(CoinflipCreated(id="cf-1", bet_amount=Decimal("10")))
        assert n.category == CATEGORY_GAMES
        assert n.key.disambiguator == "cf-1"
        assert _fields(n)["\U0001f4b0 Bet Amount"] == "**10 HBAR**"
        assert "**HEADS**" in _fields(n)["\U0001fa99 Creator Choice"]

    def test_created_and_settled_for_same_game_have_distinct_keys(self):
        created = build_coinflip_created(CoinflipCreated(id="cf-1", bet_amount=Decimal("1")))
        settled = build_coinflip_settled(
            CoinflipSettled(game_id="cf-1", wager_amount=Decimal("1"))
        )
        assert created.key != settled.key

    def test_settled_fields(self):
        n = build_coinflip_settled(CoinflipSettled(
            game_id="cf-9",
            wager_amount=Decimal("10.0"),
            winner_id="0.0.7",
            winning_side="tails",
            challenged_by_bot=True,
            fee_charged=Decimal("0.3"),
        ))
        fields = _fields(n)
        assert fields["\U0001f4b0 Wager Amount"] == "**10 HBAR**"
        assert "**TAILS**" in fields["\U0001fa99 Winning Side"]
        assert fields["\U0001f916 Bot Game"] == "Yes"
        assert fields["\U0001f4b8 Platform Fee"] == "0.3 HBAR"

    def test_jackpot_entries_in_same_round_have_distinct_keys(self):
        def entry(count: int) -> JackpotEntry:
            return JackpotEntry.model_validate({
                "participantData": {"accountId": "0.0.8", "amountEntered": 5, "chancePercentage": 25},
                "currentPot": 100 + count,
                "participantCount": count,
                "roundId": "r-1",
            })

        assert build_jackpot_entry(entry(3)).key != build_jackpot_entry(entry(4)).key
        assert build_jackpot_entry(entry(3)).key == build_jackpot_entry(entry(3)).key

    def test_jackpot_winner_key_is_round_id(self):
        n = build_jackpot_winner(JackpotWinner(
            round_id="round-456",
            prize_amount=Decimal("95"),
            participant_count=6,
            total_pot=Decimal("100"),
        ))
        assert n.key.disambiguator == "round-456"
        assert _fields(n)["\U0001f3c6 Winner"] == "Anonymous"
        assert _fields(n)["\U0001f3af Win Chance"] == "N/A%"

    def test_links_can_be_overridden(self):
        n = build_coinflip_created(
            CoinflipCreated(id="cf-1", bet_amount=Decimal("1")),
            {"coinflip": "https://play.test/cf"},
        )
        assert "https://play.test/cf" in n.body


class TestRevenueNotification:
    def _diff(self) -> DiffResult:
        now = datetime.now(UTC)
        previous = BalanceSnapshot.from_amounts({"0.0.1": Decimal("10.0005"), "0.0.2": Decimal("0")}, now)
        current = BalanceSnapshot.from_amounts({"0.0.1": Decimal("12.0"), "0.0.2": Decimal("3.456")}, now)
        return DiffResult(
            previous=previous,
            current=current,
            delta_per_account=MappingProxyType({"0.0.1": Decimal("1.9995"), "0.0.2": Decimal("3.456")}),
            delta_total=current.total - previous.total,
            is_baseline=False,
        )

    def test_rounding_only_in_presentation(self):
        diff = self._diff()
        n = build_revenue_update("Coinflip", diff, {"coinflip": "0.0.1", "jackpot": "0.0.2"}, bucket=7)
        fields = _fields(n)
        assert n.category == CATEGORY_REVENUE
        assert n.key.disambiguator == "7"
        assert n.delta_total == Decimal("5.4555")
        assert fields["➕ Revenue Increase"] == "**+5.4555 HBAR**"
        assert fields["\U0001f48e Total Revenue"] == "**15.46 HBAR**"
        assert fields["Coinflip Revenue"] == "12.00 HBAR"
        assert fields["Jackpot Revenue"] == "3.46 HBAR"


class TestFormatting:
    def test_fmt_amount_drops_trailing_zeros(self):
        assert fmt_amount(Decimal("10.0")) == "10"
        assert fmt_amount(Decimal("100")) == "100"
        assert fmt_amount(Decimal("0.30")) == "0.3"

    def test_fmt_fixed_rounds_half_up(self):
        assert fmt_fixed(Decimal("1.99995"), 4) == "2.0000"
        assert fmt_fixed(Decimal("0.125"), 2) == "0.13"

    def test_to_embed_branding(self):
        n = build_coinflip_settled(CoinflipSettled(game_id="cf-1", wager_amount=Decimal("1")))
        embed = to_embed(n)
        assert isinstance(embed, discord.Embed)
        assert embed.footer.text == FOOTER_TEXT
        assert len(embed.fields) == 6
        assert embed.timestamp is not None
