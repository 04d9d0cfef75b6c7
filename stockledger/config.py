"""Configuration loading for stockledger.

Settings live in ``~/.config/stockledger/config.toml``. A missing file
means defaults; a few values can be overridden from the environment.
"""

import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_DIR = Path.home() / ".config" / "stockledger"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "ledger.db"

ENV_FINNHUB_TOKEN = "FINNHUB_API_TOKEN"
ENV_DB_PATH = "STOCKLEDGER_DB"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class DatabaseSettings(BaseModel):
    path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    timeout: float = Field(default=5.0, gt=0, description="Seconds to wait on a locked database")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value):
        return Path(value).expanduser()


class PriceSettings(BaseModel):
    finnhub_token: str = Field(default="", description="Finnhub API token; empty disables live prices")
    timeout: float = Field(default=5.0, gt=0, description="Seconds allowed per price lookup")
    max_workers: int = Field(default=8, ge=1, description="Concurrent price lookups per snapshot")
    static: dict[str, float] = Field(default_factory=dict, description="Fixed symbol -> price table")


class Settings(BaseModel):
    """Application settings."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    prices: PriceSettings = Field(default_factory=PriceSettings)


def load_settings(
    config_path: Optional[Path] = None,
    env: Optional[dict[str, str]] = None,
) -> Settings:
    """Load settings from a TOML file and the environment.

    Args:
        config_path: Path to the config file. Defaults to
            ``~/.config/stockledger/config.toml``.
        env: Environment mapping, defaults to ``os.environ``.

    Returns:
        The validated settings.

    Raises:
        ConfigError: If the file exists but cannot be parsed or validated.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    env = os.environ if env is None else env

    data: dict = {}
    if path.exists():
        try:
            data = toml.load(path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e

    data.setdefault("database", {})
    data.setdefault("prices", {})
    if env.get(ENV_DB_PATH):
        data["database"]["path"] = env[ENV_DB_PATH]
    if env.get(ENV_FINNHUB_TOKEN):
        data["prices"]["finnhub_token"] = env[ENV_FINNHUB_TOKEN]

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def write_template(config_path: Optional[Path] = None) -> Path:
    """Create a template configuration file.

    Args:
        config_path: Destination, defaults to the standard location.

    Returns:
        Path of the written file.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "database": {
            "path": str(DEFAULT_DB_PATH),
            "timeout": 5.0,
        },
        "prices": {
            "finnhub_token": "",  # Leave empty to use FINNHUB_API_TOKEN env var
            "timeout": 5.0,
            "max_workers": 8,
            "static": {},
        },
    }

    with open(path, "w") as f:
        toml.dump(template, f)

    return path
