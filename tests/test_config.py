"""Tests for configuration loading."""

from decimal import Decimal
from pathlib import Path

import pytest

from futuresim.config import (
    ConfigError,
    Settings,
    get_config_dir,
    get_config_path,
    load_settings,
    write_template_config,
)


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("FUTURESIM_HOME", str(tmp_path))
    return tmp_path


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, home: Path):
        settings = load_settings()

        assert settings == Settings()
        assert settings.ledger.starting_balance == Decimal("1000000")
        assert settings.market.default_symbol == "HOG"
        assert settings.data_dir() == home / "data"

    def test_values_are_read(self, home: Path):
        get_config_path().write_text(
            '[ledger]\nstarting_balance = 2500.75\ndata_dir = "/srv/futuresim"\n'
            '[market]\ndefault_symbol = "GOLD"\n'
        )

        settings = load_settings()

        assert settings.ledger.starting_balance == Decimal("2500.75")
        assert settings.data_dir() == Path("/srv/futuresim")
        assert settings.market.default_symbol == "GOLD"

    def test_unparseable_file(self, home: Path):
        get_config_path().write_text("[ledger\nstarting_balance = ")

        with pytest.raises(ConfigError):
            load_settings()

    def test_invalid_value(self, home: Path):
        get_config_path().write_text("[ledger]\nstarting_balance = -5\n")

        with pytest.raises(ConfigError):
            load_settings()

    def test_template_round_trips(self, home: Path):
        path = write_template_config()

        assert path == home / "config.toml"
        assert load_settings() == Settings()


def test_config_dir_defaults_to_home(monkeypatch):
    monkeypatch.delenv("FUTURESIM_HOME", raising=False)
    assert get_config_dir() == Path.home() / ".config" / "futuresim"
