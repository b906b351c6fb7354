"""
ledgerhook.services.embeds — Notification + Discord embed builders
===================================================================

All notification text lives here so routes and services only supply data.
Builders return a :class:`Notification` (with its dedup key); the
dispatcher turns it into a :class:`discord.Embed` via :func:`to_embed`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

import discord

from ledgerhook.constants import (
    CATEGORY_GAMES,
    CATEGORY_REVENUE,
    COLOR_COINFLIP_CREATED,
    COLOR_COINFLIP_SETTLED,
    COLOR_JACKPOT_ENTRY,
    COLOR_JACKPOT_WINNER,
    COLOR_REVENUE,
    CURRENCY,
    DEFAULT_LINKS,
    FOOTER_ICON_URL,
    FOOTER_TEXT,
    THUMBNAIL_URL,
)
from ledgerhook.engine.events import (
    CoinflipCreated,
    CoinflipSettled,
    EmbedField,
    JackpotEntry,
    JackpotWinner,
    Notification,
    NotificationKey,
)
from ledgerhook.engine.snapshot import DiffResult

TITLE_COINFLIP_CREATED = "\U0001f3ae New Coinflip Game Created!"
TITLE_COINFLIP_SETTLED = "\U0001f3c6 Coinflip Game Completed!"
TITLE_JACKPOT_ENTRY = "\U0001f3b0 New Jackpot Entry!"
TITLE_JACKPOT_WINNER = "\U0001f389 Jackpot Winner Announced!"
TITLE_REVENUE = "\U0001f4b0 Platform Revenue Updated!"


# ---------------------------------------------------------------------------
# Formatting helpers (presentation-only rounding)
# ---------------------------------------------------------------------------
def fmt_amount(amount: Decimal) -> str:
    """Render a payload amount as sent, without a trailing ``.0``."""
    return format(amount.normalize(), "f")


def fmt_fixed(amount: Decimal, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    return format(amount.quantize(quantum, rounding=ROUND_HALF_UP), "f")


def _side(is_heads: bool) -> str:
    return "**HEADS** \U0001fa99" if is_heads else "**TAILS** \U0001fa99"


def _link(links: Mapping[str, str] | None, name: str) -> str:
    return (links or {}).get(name) or DEFAULT_LINKS[name]


# ---------------------------------------------------------------------------
# Game notifications
# ---------------------------------------------------------------------------
def build_coinflip_created(
    game: CoinflipCreated, links: Mapping[str, str] | None = None
) -> Notification:
    url = _link(links, "coinflip")
    return Notification(
        category=CATEGORY_GAMES,
        title=TITLE_COINFLIP_CREATED,
        body=(
            f"\U0001f3af **Game ID {game.id}** is ready to challenge!\n\n"
            f"\U0001f3ae **[\U0001f680 PLAY NOW - JOIN THE GAME!]({url})**"
        ),
        color=COLOR_COINFLIP_CREATED,
        key=NotificationKey(CATEGORY_GAMES, TITLE_COINFLIP_CREATED, game.id),
        fields=(
            EmbedField("\U0001f194 Game ID", f"`{game.id}`"),
            EmbedField("\U0001f4b0 Bet Amount", f"**{fmt_amount(game.bet_amount)} {CURRENCY}**"),
            EmbedField("\U0001f464 Creator", game.creator or "Unknown"),
            EmbedField("\U0001fa99 Creator Choice", _side(game.creator_choice == 0)),
            EmbedField("⏰ Status", "\U0001f7e2 **Waiting for challenger**"),
            EmbedField("\U0001f3af Challenge This Game", f"**[\U0001f3ae JOIN BATTLE →]({url})**"),
        ),
    )


def build_coinflip_settled(game: CoinflipSettled) -> Notification:
    return Notification(
        category=CATEGORY_GAMES,
        title=TITLE_COINFLIP_SETTLED,
        body="A coinflip game has been settled with a winner.",
        color=COLOR_COINFLIP_SETTLED,
        key=NotificationKey(CATEGORY_GAMES, TITLE_COINFLIP_SETTLED, game.game_id),
        fields=(
            EmbedField("\U0001f194 Game ID", f"`{game.game_id}`"),
            EmbedField("\U0001f4b0 Wager Amount", f"**{fmt_amount(game.wager_amount)} {CURRENCY}**"),
            EmbedField("\U0001f3c6 Winner", game.winner_id or "Unknown"),
            EmbedField("\U0001fa99 Winning Side", _side(game.winning_side.upper() == "HEADS")),
            EmbedField("\U0001f916 Bot Game", "Yes" if game.challenged_by_bot else "No"),
            EmbedField("\U0001f4b8 Platform Fee", f"{fmt_amount(game.fee_charged)} {CURRENCY}"),
        ),
    )


def build_jackpot_entry(
    entry: JackpotEntry, links: Mapping[str, str] | None = None
) -> Notification:
    player = entry.participant_data
    # Same player can enter a round more than once; the running count tells
    # those entries apart.
    disambiguator = ":".join((
        entry.round_id or "-",
        player.account_id or player.username or "anonymous",
        str(entry.participant_count),
        fmt_amount(entry.current_pot),
    ))
    return Notification(
        category=CATEGORY_GAMES,
        title=TITLE_JACKPOT_ENTRY,
        body="Someone joined the current jackpot round.",
        color=COLOR_JACKPOT_ENTRY,
        key=NotificationKey(CATEGORY_GAMES, TITLE_JACKPOT_ENTRY, disambiguator),
        fields=(
            EmbedField("\U0001f464 Player", player.display_name),
            EmbedField("\U0001f4b0 Entry Amount", f"**{fmt_amount(player.amount_entered)} {CURRENCY}**"),
            EmbedField("\U0001f3af Win Chance", f"{fmt_amount(player.chance_percentage)}%"),
            EmbedField("\U0001f3c6 Current Pot", f"**{fmt_amount(entry.current_pot)} {CURRENCY}**"),
            EmbedField("\U0001f465 Total Players", f"{entry.participant_count} players"),
            EmbedField("\U0001f517 Join Jackpot", f"[Play Now]({_link(links, 'jackpot')})"),
        ),
    )


def build_jackpot_winner(winner: JackpotWinner) -> Notification:
    chance = fmt_amount(winner.win_chance) if winner.win_chance is not None else "N/A"
    return Notification(
        category=CATEGORY_GAMES,
        title=TITLE_JACKPOT_WINNER,
        body="We have a jackpot winner! Congratulations! \U0001f38a",
        color=COLOR_JACKPOT_WINNER,
        key=NotificationKey(CATEGORY_GAMES, TITLE_JACKPOT_WINNER, winner.round_id),
        fields=(
            EmbedField("\U0001f3c6 Winner", winner.display_name),
            EmbedField("\U0001f4b0 Prize Amount", f"**{fmt_amount(winner.prize_amount)} {CURRENCY}**"),
            EmbedField("\U0001f3af Win Chance", f"{chance}%"),
            EmbedField("\U0001f3b0 Round ID", f"`{winner.round_id}`"),
            EmbedField("\U0001f465 Total Players", f"{winner.participant_count} players"),
            EmbedField("\U0001f3c6 Total Pot", f"{fmt_amount(winner.total_pot)} {CURRENCY}"),
        ),
    )


# ---------------------------------------------------------------------------
# Revenue notification
# ---------------------------------------------------------------------------
def build_revenue_update(
    game_type: str,
    diff: DiffResult,
    accounts: Mapping[str, str],
    bucket: int,
) -> Notification:
    """Build the revenue embed; *accounts* maps wallet label → account id."""
    fields = [
        EmbedField("\U0001f3ae Game Type", f"**{game_type}**"),
        EmbedField("➕ Revenue Increase", f"**+{fmt_fixed(diff.delta_total, 4)} {CURRENCY}**"),
        EmbedField("\U0001f48e Total Revenue", f"**{fmt_fixed(diff.current.total, 2)} {CURRENCY}**"),
    ]
    for label, account_id in accounts.items():
        amount = diff.current.per_account.get(account_id, Decimal("0"))
        fields.append(
            EmbedField(f"{label.title()} Revenue", f"{fmt_fixed(amount, 2)} {CURRENCY}")
        )
    fields.append(EmbedField("\U0001f4c8 Status", "\U0001f680 Growing steadily!"))

    return Notification(
        category=CATEGORY_REVENUE,
        title=TITLE_REVENUE,
        body=f"Revenue has been updated after {game_type} game settlement.",
        color=COLOR_REVENUE,
        key=NotificationKey(CATEGORY_REVENUE, TITLE_REVENUE, str(bucket)),
        fields=tuple(fields),
        delta_total=diff.delta_total,
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
def to_embed(notification: Notification, *, now: datetime | None = None) -> discord.Embed:
    """Render *notification* into the branded Discord embed."""
    embed = discord.Embed(
        title=notification.title,
        description=notification.body,
        color=notification.color,
        timestamp=now or datetime.now(UTC),
    )
    for f in notification.fields:
        embed.add_field(name=f.name, value=f.value, inline=f.inline)
    embed.set_footer(text=FOOTER_TEXT, icon_url=FOOTER_ICON_URL)
    embed.set_thumbnail(url=THUMBNAIL_URL)
    return embed
