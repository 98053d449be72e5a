"""Configuration management - environment settings plus YAML display defaults."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DISPLAY_CONFIG: dict[str, Any] = {
    "chart": {
        "date_format": "%d %b",
        "growth_date_format": "%b %d",
    },
    "profile": {
        "default_name": "Baby",
    },
}


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="127.0.0.1", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Data
    db_path: Path = Field(default=Path("data/baby_tracker.db"), description="SQLite database file")
    data_dir: Path = Field(default=Path("data"), description="Directory for the JSON settings store")
    redis_url: str | None = Field(default=None, description="Redis URL for the settings store")
    config_dir: Path | None = Field(default=None, description="Directory holding tracker.yaml")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_display_config(config_dir_str: str = "") -> dict[str, Any]:
    """Display defaults (chart labels, profile name). File values override built-ins."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    loaded = load_yaml_config(config_dir / "tracker.yaml")
    merged: dict[str, Any] = {}
    for section, defaults in DEFAULT_DISPLAY_CONFIG.items():
        merged[section] = {**defaults, **(loaded.get(section) or {})}
    return merged
