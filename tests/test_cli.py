"""End-to-end tests for the futuresim CLI."""

import json
from decimal import Decimal
from pathlib import Path

import pytest
from click.testing import CliRunner

from futuresim.cli import cli
from futuresim.db.store import LedgerStore


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    """Point the CLI at an isolated config directory."""
    monkeypatch.setenv("FUTURESIM_HOME", str(tmp_path))
    monkeypatch.setenv("COLUMNS", "200")
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def register_and_login(runner: CliRunner, username: str = "alice", password: str = "pw") -> None:
    result = runner.invoke(cli, ["register", username], input=f"{password}\n{password}\n")
    assert result.exit_code == 0, result.output
    result = runner.invoke(cli, ["login", username, "--password", password])
    assert result.exit_code == 0, result.output


class TestAccounts:
    def test_help_lists_commands(self, home: Path, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("register", "login", "buy", "sell", "summary", "history", "quote"):
            assert command in result.output

    def test_register_creates_config_and_account(self, home: Path, runner: CliRunner):
        result = runner.invoke(cli, ["register", "alice"], input="pw\npw\n")

        assert result.exit_code == 0, result.output
        assert "Registered" in result.output
        assert (home / "config.toml").exists()
        assert LedgerStore(home / "data").get_account("alice").balance == Decimal("1000000")

    def test_duplicate_registration_fails(self, home: Path, runner: CliRunner):
        runner.invoke(cli, ["register", "alice"], input="pw\npw\n")

        result = runner.invoke(cli, ["register", "alice"], input="pw\npw\n")

        assert result.exit_code == 1
        assert "already taken" in result.output

    def test_login_and_whoami(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        result = runner.invoke(cli, ["whoami"])

        assert result.exit_code == 0
        assert "alice" in result.output
        assert json.loads((home / "session.json").read_text())["username"] == "alice"

    def test_wrong_password(self, home: Path, runner: CliRunner):
        runner.invoke(cli, ["register", "alice"], input="pw\npw\n")

        result = runner.invoke(cli, ["login", "alice", "--password", "nope"])

        assert result.exit_code == 1
        assert "Login Failed" in result.output

    def test_logout_ends_session(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        assert runner.invoke(cli, ["logout"]).exit_code == 0
        result = runner.invoke(cli, ["whoami"])

        assert result.exit_code == 1
        assert "Not Logged In" in result.output

    def test_commands_require_login(self, home: Path, runner: CliRunner):
        result = runner.invoke(cli, ["buy", "HOG", "1", "-p", "100"])

        assert result.exit_code == 1
        assert "futuresim login" in result.output


class TestTrading:
    def test_buy_sell_and_summary(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        assert runner.invoke(cli, ["buy", "HOG", "10", "-p", "120"]).exit_code == 0
        assert runner.invoke(cli, ["buy", "hog", "5", "-p", "130"]).exit_code == 0
        result = runner.invoke(cli, ["sell", "HOG", "15", "-p", "140"])

        assert result.exit_code == 0, result.output
        assert "Trade Executed" in result.output
        assert "+250.05" in result.output

        account = LedgerStore(home / "data").get_account("alice")
        assert account.balance == Decimal("1000250")
        assert account.holdings == {}

        summary = runner.invoke(cli, ["summary"])
        assert summary.exit_code == 0
        assert "1,000,250.00" in summary.output
        assert "No open holdings" in summary.output

    def test_buy_at_market_price(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        result = runner.invoke(cli, ["buy", "GOLD", "2"])

        assert result.exit_code == 0, result.output
        assert "Market price for GOLD" in result.output
        holding = LedgerStore(home / "data").get_account("alice").holdings["GOLD"]
        assert holding.position == 2

    def test_summary_lists_holdings(self, home: Path, runner: CliRunner):
        register_and_login(runner)
        runner.invoke(cli, ["buy", "SOY", "3", "-p", "3200"])

        result = runner.invoke(cli, ["summary"])

        assert result.exit_code == 0
        assert "SOY" in result.output
        assert "3,200.00" in result.output

    def test_oversell_is_reported(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        result = runner.invoke(cli, ["sell", "HOG", "1", "-p", "100"])

        assert result.exit_code == 1
        assert "Order Rejected" in result.output
        assert LedgerStore(home / "data").get_account("alice").history == []

    def test_invalid_quantity_is_reported(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        result = runner.invoke(cli, ["buy", "-p", "100", "HOG", "--", "-5"])

        assert result.exit_code == 1
        assert "Invalid Order" in result.output
        assert LedgerStore(home / "data").get_account("alice").history == []

    @pytest.mark.parametrize("symbol", [" ", "bad sym"])
    def test_invalid_symbol_at_market_price_is_reported(
        self, home: Path, runner: CliRunner, symbol: str
    ):
        register_and_login(runner)

        result = runner.invoke(cli, ["buy", symbol, "1"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid Order" in result.output
        assert "Invalid symbol" in result.output
        assert not (home / "data" / "prices.json").exists()
        assert LedgerStore(home / "data").get_account("alice").history == []

    def test_insufficient_funds_is_reported(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        result = runner.invoke(cli, ["buy", "GOLD", "1", "-p", "2000000"])

        assert result.exit_code == 1
        assert "Insufficient balance" in result.output


class TestHistoryAndMarket:
    def test_history_filter(self, home: Path, runner: CliRunner):
        register_and_login(runner)
        runner.invoke(cli, ["buy", "HOG", "1", "-p", "100"])
        runner.invoke(cli, ["buy", "GOLD", "1", "-p", "480"])

        result = runner.invoke(cli, ["history", "-s", "gold"])

        assert result.exit_code == 0
        assert "GOLD" in result.output
        assert "HOG" not in result.output

    def test_empty_history(self, home: Path, runner: CliRunner):
        register_and_login(runner)

        result = runner.invoke(cli, ["history"])

        assert result.exit_code == 0
        assert "No trades yet" in result.output

    def test_quote_and_markets(self, home: Path, runner: CliRunner):
        quote = runner.invoke(cli, ["quote", "HOG", "CRUDE"])
        markets = runner.invoke(cli, ["markets"])

        assert quote.exit_code == 0
        assert "HOG" in quote.output and "CRUDE" in quote.output
        assert markets.exit_code == 0
        assert "MOUTAI" in markets.output

    def test_quote_rejects_invalid_symbol(self, home: Path, runner: CliRunner):
        result = runner.invoke(cli, ["quote", "HOG", " "])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid Symbol" in result.output
        assert not (home / "data" / "prices.json").exists()
