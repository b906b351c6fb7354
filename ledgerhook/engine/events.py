"""
ledgerhook.engine.events — Game event payloads and the Notification envelope
=============================================================================

Game backends post these payloads (camelCase JSON) when something happens on
the platform.  Each one is turned into a :class:`Notification` whose
:class:`NotificationKey` is built from the event's own ids, so deduplication
never depends on how an embed field happens to be labelled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = [
    "CoinflipCreated",
    "CoinflipSettled",
    "EmbedField",
    "JackpotEntry",
    "JackpotParticipant",
    "JackpotWinner",
    "Notification",
    "NotificationKey",
]


# ---------------------------------------------------------------------------
# Notification envelope
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class NotificationKey:
    """Semantic identity of one notification, used only for dedup.

    ``disambiguator`` is a domain id (game / round id) for discrete events or
    a time-bucket index for periodic ones.
    """

    category: str
    title: str
    disambiguator: str

    def __str__(self) -> str:
        return f"{self.category}:{self.title}:{self.disambiguator}"


@dataclass(frozen=True, slots=True)
class EmbedField:
    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True, slots=True)
class Notification:
    """A rendered-ready notification bound for one webhook category."""

    category: str
    title: str
    body: str
    color: int
    key: NotificationKey
    fields: tuple[EmbedField, ...] = field(default_factory=tuple)
    delta_total: Decimal | None = None  # revenue notifications only


# ---------------------------------------------------------------------------
# Inbound game payloads
# ---------------------------------------------------------------------------
class _GamePayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class CoinflipCreated(_GamePayload):
    """A coinflip game is open and waiting for a challenger."""
    id: str
    bet_amount: Decimal
    creator: str | None = None
    creator_choice: int = 0  # 0 = heads, 1 = tails


class CoinflipSettled(_GamePayload):
    """A coinflip game finished and paid out."""
    game_id: str
    wager_amount: Decimal
    winner_id: str | None = None
    winning_side: str = "HEADS"
    challenged_by_bot: bool = False
    fee_charged: Decimal = Decimal("0")


class JackpotParticipant(_GamePayload):
    username: str | None = None
    account_id: str | None = None
    amount_entered: Decimal
    chance_percentage: Decimal

    @property
    def display_name(self) -> str:
        return self.username or self.account_id or "Anonymous"


class JackpotEntry(_GamePayload):
    """A player bought into the running jackpot round."""
    participant_data: JackpotParticipant
    current_pot: Decimal
    participant_count: int
    round_id: str | None = None


class JackpotWinner(_GamePayload):
    """A jackpot round was drawn."""
    round_id: str
    prize_amount: Decimal
    participant_count: int
    total_pot: Decimal
    winner_username: str | None = None
    winner_id: str | None = None
    win_chance: Decimal | None = None

    @property
    def display_name(self) -> str:
        return self.winner_username or self.winner_id or "Anonymous"
