"""Application configuration settings."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using Fly Volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/rental.db"
    return "sqlite:///./rental.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Rental Ledger"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database - defaults to Fly Volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # Storage backend: "sql" uses DATABASE_URL, "json" keeps a local file
    STORAGE_BACKEND: Literal["sql", "json"] = "sql"
    JSON_STORE_PATH: str = "rental_data.json"

    LOG_LEVEL: str = "INFO"


settings = Settings()
