"""Application configuration using Pydantic Settings."""
import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_data_dir() -> Path:
    """Per-user configuration directory for the settings store."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "timebird"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMEBIRD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment (development runs get their own settings file)
    environment: Literal["production", "development"] = "production"
    data_dir: Path = Field(default_factory=default_data_dir)

    # Moneybird
    moneybird_api_url: str = "https://moneybird.com/api/v2"
    moneybird_web_url: str = "https://moneybird.com"
    request_timeout_seconds: float = 10.0
    page_size: int = 20

    # Timer
    tick_interval_seconds: float = 1.0

    # Host API
    api_host: str = "127.0.0.1"
    api_port: int = 1420
    cors_origins: str = "http://localhost:1420,tauri://localhost"

    log_level: str = "INFO"

    @property
    def store_file_name(self) -> str:
        """Settings file name for the current environment."""
        if self.environment == "development":
            return "dev-store.json"
        return "store.json"

    @property
    def store_path(self) -> Path:
        """Full path of the settings file."""
        return self.data_dir / self.store_file_name

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()
