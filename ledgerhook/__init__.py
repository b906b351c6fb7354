"""
Ledgerhook — Game Event Relay & Revenue Watch for Discord
==========================================================
Relays game-platform events (coinflip games, jackpot rounds) into Discord
webhook notifications and reconciles the platform's mirror-node wallet
balances after settlements to announce revenue growth.

Package layout::

    ledgerhook/
    ├── config.py          # YAML + .env → typed Python config
    ├── constants.py       # Embed colors, footer, links
    ├── runtime.py         # Owned state container (tracker, dedup, debouncer)
    ├── smoke.py           # CLI harness that sends sample notifications
    ├── engine/
    │   ├── events.py      # Game event payloads + Notification envelope
    │   ├── snapshot.py    # Balance snapshot tracker (baseline + deltas)
    │   ├── dedup.py       # Trailing-window notification deduplicator
    │   └── debounce.py    # Time-bucketed reconciliation debouncer
    ├── services/
    │   ├── balance_source.py       # Mirror-node balance adapter
    │   ├── embeds.py               # Discord embed builders
    │   ├── dispatcher.py           # Webhook delivery (no retry)
    │   ├── notification_service.py # Dedup-gated send flow
    │   └── revenue_service.py      # Reconciliation action
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Runtime + admin key dependencies
        └── routes/        # Notify, revenue and test endpoints
"""

__version__ = "0.1.0"
