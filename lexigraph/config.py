"""Application configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Application settings, configurable via environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Path("data")

    # Logging
    log_level: LogLevel = "INFO"
    log_file_enabled: bool = False
    log_file_path: Path | None = None
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_file_backup_count: int = 5

    @property
    def resolved_log_file_path(self) -> Path:
        """Return log file path, defaulting to data_dir/lexigraph.log if not set."""
        return self.log_file_path or self.data_dir / "lexigraph.log"

    @property
    def audio_dir(self) -> Path:
        return self.data_dir / "audio"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "lexigraph.db"

    # Frequency service
    frequency_api_url: str = "http://localhost:8000"

    # Translation service
    translation_api_url: str = "http://localhost:8001"
    translation_enabled: bool = False
    target_language: str = "en"

    # Timeouts (seconds)
    enrichment_timeout: float = 30.0
    audio_download_timeout: float = 30.0
    transaction_timeout: float = 200.0

    # Audio limits
    audio_max_bytes: int = 10 * 1024 * 1024  # 10 MB


settings = Settings()
