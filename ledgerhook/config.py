"""
ledgerhook.config — YAML Configuration Loader
==============================================

**Why this file exists:**
``config.yaml`` holds the non-secret tuning for the relay (tracked wallets,
mirror-node URL, dedup and debounce windows, revenue threshold).  Secrets
(Discord webhook URLs, the admin key) come from the environment / ``.env``
so the YAML file can be committed.

Usage::

    from ledgerhook.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.accounts)              # {"coinflip": "0.0.9276566", ...}
    print(cfg.revenue_threshold)     # Decimal("0.001")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = "config.yaml"


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class LedgerhookConfig:
    """Immutable configuration loaded from ``config.yaml`` + environment."""

    # Identity
    service_name: str

    # Ledger
    mirror_node_url: str
    accounts: dict[str, str]  # label → Hedera account id

    # Revenue
    revenue_threshold: Decimal = Decimal("0.001")
    revenue_dedup_bucket_seconds: int = 60

    # Dedup / debounce timing (seconds)
    dedup_window_seconds: float = 30.0
    debounce_bucket_seconds: int = 30
    coinflip_check_delay: float = 15.0
    jackpot_check_delay: float = 20.0

    # Outbound HTTP
    http_timeout: float = 10.0

    # Discord webhooks (from environment)
    games_webhook_url: str | None = None
    revenue_webhook_url: str | None = None
    revenue_webhook_fallback: bool = True  # revenue → games when unset

    # Admin endpoints; open when unset
    admin_key: str | None = None

    # Presentation links used in embeds
    links: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _decimal(value, key: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{key} must be numeric, got {value!r}") from exc


def _env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path | None = None) -> LedgerhookConfig:
    """Read *path* and return a :class:`LedgerhookConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.  Defaults to
        ``$LEDGERHOOK_CONFIG`` or ``config.yaml`` in the working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    ValueError
        If ``accounts`` is empty or a numeric setting is malformed.
    """
    config_path = Path(path or os.getenv("LEDGERHOOK_CONFIG") or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    accounts = {str(label): str(acct) for label, acct in raw["accounts"].items()}
    if not accounts:
        raise ValueError("accounts must list at least one wallet to track")

    return LedgerhookConfig(
        service_name=raw["service_name"],
        mirror_node_url=str(raw["mirror_node_url"]).rstrip("/"),
        accounts=accounts,
        revenue_threshold=_decimal(
            raw.get("revenue_threshold", "0.001"), "revenue_threshold"
        ),
        revenue_dedup_bucket_seconds=int(raw.get("revenue_dedup_bucket_seconds", 60)),
        dedup_window_seconds=float(raw.get("dedup_window_seconds", 30)),
        debounce_bucket_seconds=int(raw.get("debounce_bucket_seconds", 30)),
        coinflip_check_delay=float(raw.get("coinflip_check_delay", 15)),
        jackpot_check_delay=float(raw.get("jackpot_check_delay", 20)),
        http_timeout=float(raw.get("http_timeout", 10)),
        games_webhook_url=_env("DISCORD_WEBHOOK_URL_GAMES"),
        revenue_webhook_url=_env("DISCORD_WEBHOOK_URL_REVENUE"),
        revenue_webhook_fallback=bool(raw.get("revenue_webhook_fallback", True)),
        admin_key=_env("LEDGERHOOK_ADMIN_KEY"),
        links={str(k): str(v) for k, v in (raw.get("links") or {}).items()},
    )
