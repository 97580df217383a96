"""
Application configuration settings.

Central configuration module using Pydantic BaseSettings with environment variable support.
Loads from .env file and environment variables.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists (python-dotenv)
env_path = Path(".env")
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "hba-check"

    # Cluster layout: <CLUSTER_CONF_ROOT>/<version>/<name>/pg_hba.conf
    CLUSTER_CONF_ROOT: str = Field(
        default="/etc/postgresql",
        description="Directory holding per-version cluster configuration directories",
    )

    # Methods assumed when --method is omitted
    DEFAULT_NETWORK_METHOD: str = Field(
        default="md5",
        description="Authentication method used for --ip queries without --method",
    )
    DEFAULT_LOCAL_METHOD: str = Field(
        default="ident sameuser",
        description="Authentication method used for local-socket queries without --method",
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    LOG_DIR: Optional[str] = Field(
        default=None,
        description="Directory for the rotating log file. Leave empty to log to stderr only.",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @property
    def cluster_conf_root(self) -> Path:
        return Path(self.CLUSTER_CONF_ROOT)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
