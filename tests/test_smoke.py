"""
tests/test_smoke.py — Sample-notification CLI
==============================================
"""

from __future__ import annotations

import asyncio

import pytest

from conftest import build_runtime, make_config

from ledgerhook import smoke


def run_async(coro):
    """Run an async coroutine in a new event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.mark.parametrize("kind", list(smoke.SAMPLES))
def test_single_sample_is_sent(runtime, webhook, kind):
    assert run_async(smoke.run(kind, runtime)) is True
    assert len(webhook.posts) == 1


def test_all_sends_every_sample_then_checks_revenue(runtime, mirror, webhook):
    mirror.set_hbar(coinflip=100_000_000, jackpot=0)
    assert run_async(smoke.run("all", runtime, pause=0)) is True
    assert len(webhook.posts) == len(smoke.SAMPLES)
    assert runtime.tracker.last_snapshot().observed_at is not None


def test_failed_sample_reports_failure(runtime, webhook, capsys):
    webhook.status = 500
    assert run_async(smoke.run("coinflip", runtime)) is False
    assert "failed" in capsys.readouterr().out


def test_config_check_requires_games_webhook(mirror, webhook, clock, capsys):
    runtime = build_runtime(make_config(games_webhook_url=None), mirror, webhook, clock)
    assert run_async(smoke.run("config", runtime)) is False
    assert "DISCORD_WEBHOOK_URL_GAMES is required" in capsys.readouterr().out


def test_config_check_reports_revenue_fallback(mirror, webhook, clock, capsys):
    runtime = build_runtime(make_config(revenue_webhook_url=None), mirror, webhook, clock)
    assert run_async(smoke.run("config", runtime)) is True
    assert "falls back to games" in capsys.readouterr().out


def test_stats_prints_balances(runtime, mirror, capsys):
    mirror.set_hbar(coinflip=150_000_000, jackpot=50_000_000)
    assert run_async(smoke.run("stats", runtime)) is True
    out = capsys.readouterr().out
    assert "coinflip: 1.50 HBAR" in out
    assert "total: 2.00 HBAR" in out


def test_unknown_command_rejected_by_parser():
    with pytest.raises(SystemExit):
        smoke.main(["poker"])
