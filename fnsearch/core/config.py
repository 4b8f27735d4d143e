"""
Configuration management for the function signature search service.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# ENV_FILE wins over a local .env
_env_file = os.environ.get("ENV_FILE")
if _env_file and Path(_env_file).exists():
    load_dotenv(_env_file)
    logger.debug(f"Loaded environment from {_env_file} (from ENV_FILE)")
elif Path(".env").exists():
    load_dotenv(".env")
    logger.debug("Loaded environment from .env")


def _parse_list(v):
    """Parse a list from a JSON array or a comma-separated string."""
    if isinstance(v, str):
        try:
            return json.loads(v)
        except json.JSONDecodeError:
            return [item.strip() for item in v.split(',') if item.strip()]
    return v


class Settings(BaseSettings):
    """Application settings."""

    # Application settings
    app_name: str = "Elm Function Search"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Firestore settings
    gcp_project_id: str = "fnsearch-local"
    firestore_database_id: Optional[str] = "(default)"
    firestore_collection_prefix: str = ""
    firestore_batch_size: int = Field(default=500, ge=1, le=500)
    service_account_key_path: Optional[str] = None

    # Query settings
    search_page_size: int = Field(default=10, ge=1)
    suggest_limit: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Scrape settings
    package_catalog_url: str = "https://package.elm-lang.org/search.json"
    git_host_url: str = "https://github.com"
    repo_cache_dir: str = "./repo_cache"
    git_timeout: int = 120  # seconds
    scrape_workers: int = Field(default=4, ge=1)
    source_extensions: List[str] = [".elm"]
    source_folders: List[str] = ["src"]

    # API settings
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('cors_origins', 'source_extensions', 'source_folders', mode='before')
    @classmethod
    def parse_lists(cls, v):
        """Parse list settings from various input formats."""
        return _parse_list(v)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level names."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
