from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Watch configuration
    initial_directory: str = ""  # Directory monitored at startup (empty = none)
    poll_interval_ms: int = Field(default=1000, ge=1)
    drive_watcher_enabled: bool = True
    directory_watcher_enabled: bool = True

    # Listing failures back off exponentially up to this ceiling
    listing_retry_max_backoff_ms: int = Field(default=30000, ge=1)

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = "logs/nightswatch.log"
    log_retention_days: int = 30

    # Host application
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="NIGHTSWATCH_", env_file="settings.env", extra="ignore"
    )

    @property
    def log_directory(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_file_path).parent
