"""Configuration for candlescan.

Settings live in a TOML file under ``~/.config/candlescan/config.toml``
in a ``[screener]`` table. A missing file means defaults.
"""

from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from candlescan.sources.binance import BASE_URLS, VALID_INTERVALS


CONFIG_DIR = Path.home() / ".config" / "candlescan"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_SYMBOLS = [
    "BTCUSDT",
    "ETHUSDT",
    "BNBUSDT",
    "SOLUSDT",
    "XRPUSDT",
    "DOGEUSDT",
    "ADAUSDT",
    "AVAXUSDT",
    "LINKUSDT",
    "DOTUSDT",
    "LTCUSDT",
    "TRXUSDT",
]


class ConfigError(ValueError):
    """Raised when the config file cannot be read or is invalid."""


class ScreenerConfig(BaseModel):
    """Options recognized by the screener."""

    symbols: list[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOLS), min_length=1)
    interval: str = Field(default="30m", description="Candle interval label")
    threshold: float = Field(default=2.0, ge=0, description="Minimum body percentage")
    candle_count: int = Field(default=3, ge=2, le=1000, description="Closed candles fetched per symbol")
    market: str = Field(default="futures", description="futures or spot")
    request_timeout: float = Field(default=10.0, gt=0)
    request_delay: float = Field(default=0.2, ge=0, description="Pause between sequential requests")
    max_workers: int = Field(default=1, ge=1, le=32, description="Parallel requests; 1 means sequential")
    refresh_seconds: int = Field(default=60, ge=5, description="Presentation refresh period")
    proxy: Optional[str] = Field(default=None, description="Fallback proxy URL")
    log_level: str = Field(default="INFO")

    @field_validator("symbols")
    @classmethod
    def normalize_symbols(cls, v: list[str]) -> list[str]:
        symbols = []
        for s in v:
            s = str(s).strip().upper()
            if not s:
                raise ValueError("symbols must not contain empty entries")
            if s not in symbols:
                symbols.append(s)
        return symbols

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: str) -> str:
        if v not in VALID_INTERVALS:
            raise ValueError(f"interval must be one of {VALID_INTERVALS}")
        return v

    @field_validator("market")
    @classmethod
    def validate_market(cls, v: str) -> str:
        v = v.lower()
        if v not in BASE_URLS:
            raise ValueError(f"market must be one of {list(BASE_URLS.keys())}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return v


def load_config(path: Optional[Path] = None) -> ScreenerConfig:
    """Load the screener config.
    
    Args:
        path: Config file path (default ~/.config/candlescan/config.toml).
        
    Returns:
        ScreenerConfig, with defaults when the file does not exist.
        
    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values.
    """
    config_path = path or DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return ScreenerConfig()

    try:
        data = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e

    try:
        return ScreenerConfig(**data.get("screener", {}))
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}:\n{e}") from e


def save_config(config: ScreenerConfig, path: Optional[Path] = None) -> Path:
    """Write the config as TOML and return the path written."""
    config_path = path or DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null; unset options are left out.
    data = {"screener": config.model_dump(exclude_none=True)}
    with open(config_path, "w") as f:
        toml.dump(data, f)

    return config_path
