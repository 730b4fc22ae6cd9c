"""Configuration loading for futuresim.

Settings live in ``~/.config/futuresim/config.toml`` (or under the
directory named by ``FUTURESIM_HOME``)::

    [ledger]
    starting_balance = 1000000
    data_dir = "/var/lib/futuresim"

    [market]
    default_symbol = "HOG"

Every key is optional; a missing file means all defaults.
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

HOME_ENV_VAR = "FUTURESIM_HOME"


class ConfigError(ValueError):
    """The configuration file exists but cannot be used."""


class LedgerSettings(BaseModel):
    starting_balance: Decimal = Field(default=Decimal("1000000"), gt=0)
    data_dir: Optional[Path] = None

    @field_validator("starting_balance", mode="before")
    @classmethod
    def _float_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, float) else value


class MarketSettings(BaseModel):
    default_symbol: str = Field(default="HOG", min_length=1)


class Settings(BaseModel):
    """Resolved futuresim settings."""

    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    market: MarketSettings = Field(default_factory=MarketSettings)

    def data_dir(self) -> Path:
        """Directory holding the account table and session file."""
        return self.ledger.data_dir or get_config_dir() / "data"


def get_config_dir() -> Path:
    """Get the configuration directory."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "futuresim"


def get_config_path() -> Path:
    """Get the configuration file path."""
    return get_config_dir() / "config.toml"


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from the config file.

    Args:
        config_path: Path to read; defaults to get_config_path().

    Returns:
        Settings, all defaults if the file does not exist.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        return Settings()

    try:
        data = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e


def write_template_config(config_path: Optional[Path] = None) -> Path:
    """Write a config file holding the default settings.

    Returns:
        Path of the written file.
    """
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "ledger": {"starting_balance": 1000000},
        "market": {"default_symbol": "HOG"},
    }
    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path
