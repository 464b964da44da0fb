"""Tests for the command line interface."""

import pytest
from telegram.error import InvalidToken
from typer.testing import CliRunner

from chain_balance_monitor.cli import main as cli
from chain_balance_monitor.core.models import BalanceResult, ChainBalance, FetchFailure
from conftest import WALLET

runner = CliRunner()


@pytest.fixture(autouse=True)
def env(monkeypatch):
    for name in ["TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "CHAINS_FILE", "MONITOR_INTERVAL_MINUTES"]:
        monkeypatch.setenv(name, "")
    monkeypatch.setenv("ALCHEMY_API_KEY", "very-secret-key")
    monkeypatch.setenv("WALLET_ADDRESS", WALLET)


def test_list_chains_hides_api_key():
    result = runner.invoke(cli.app, ["list-chains"])

    assert result.exit_code == 0
    assert "ARB Sepolia" in result.output
    assert "Blast Sepolia" in result.output
    assert "very-secret-key" not in result.output


def test_check_prints_balances(monkeypatch):
    async def fake_check(settings, wallet, chains, send):
        assert wallet == WALLET
        assert chains == ["ARB Sepolia"]
        return [
            ChainBalance(
                chain="ARB Sepolia",
                result=BalanceResult(symbol="ARB", raw_amount=10**18, formatted_amount="1.0000"),
            )
        ]

    monkeypatch.setattr(cli, "_check", fake_check)

    result = runner.invoke(cli.app, ["check", "--chain", "ARB Sepolia"])

    assert result.exit_code == 0
    assert "1.0000" in result.output


def test_check_fails_when_every_chain_fails(monkeypatch):
    async def fake_check(settings, wallet, chains, send):
        return [ChainBalance(chain="ARB Sepolia", result=FetchFailure(chain="ARB Sepolia", reason="[timeout]"))]

    monkeypatch.setattr(cli, "_check", fake_check)

    result = runner.invoke(cli.app, ["check"])

    assert result.exit_code == 1
    assert "Failed to fetch" in result.output


def test_check_requires_wallet(monkeypatch):
    monkeypatch.setenv("WALLET_ADDRESS", "")

    result = runner.invoke(cli.app, ["check"])

    assert result.exit_code == 1
    assert "WALLET_ADDRESS" in result.output


def test_run_exits_cleanly_when_bot_cannot_start(monkeypatch, caplog):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "not-a-token")

    def failing_build(settings):
        raise InvalidToken("Invalid token")

    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "build_application", failing_build)

    with caplog.at_level("ERROR"):
        result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Telegram Bot Initialization Error" in caplog.text
