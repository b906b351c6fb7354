"""
ledgerhook.constants — Shared Constants
=======================================

Single source of truth for notification categories and embed presentation.
Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Notification categories (select the Discord webhook)
# ---------------------------------------------------------------------------
CATEGORY_GAMES = "games"
CATEGORY_REVENUE = "revenue"
CATEGORIES: tuple[str, ...] = (CATEGORY_GAMES, CATEGORY_REVENUE)

# ---------------------------------------------------------------------------
# Embed colors (Discord integer RGB)
# ---------------------------------------------------------------------------
COLOR_COINFLIP_CREATED = 0xF84565
COLOR_COINFLIP_SETTLED = 0x00FF00
COLOR_JACKPOT_ENTRY = 0xFFD700
COLOR_JACKPOT_WINNER = 0xFF6B35
COLOR_REVENUE = 0x00FF00

# ---------------------------------------------------------------------------
# Branding
# ---------------------------------------------------------------------------
FOOTER_TEXT = "Angryroll Gaming Platform"
FOOTER_ICON_URL = "https://i.ibb.co/4ZrYNdfK/Group-5641.png"
THUMBNAIL_URL = "https://i.ibb.co/jP4k6Bzy/Website-Logo-Text-Valo2-1.png"

DEFAULT_LINKS: dict[str, str] = {
    "coinflip": "https://angryroll.com/coinflip",
    "jackpot": "https://angryroll.com/jackpot",
}

# ---------------------------------------------------------------------------
# Ledger units
# ---------------------------------------------------------------------------
TINYBARS_PER_HBAR = 100_000_000
CURRENCY = "HBAR"
