"""
Application configuration loaded from environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """TaskBoard server configuration."""

    model_config = SettingsConfigDict(env_prefix="TB_", env_file=".env", extra="ignore")

    # Backing store
    store_backend: Literal["memory", "sqlite", "sheets"] = "sqlite"
    sqlite_path: str = "./data/taskboard.db"
    store_timeout_seconds: int = 30

    # Google Sheets (store_backend == "sheets")
    sheet_id: str = ""
    service_account_email: str = ""
    service_account_private_key: str = ""

    # Error contract: True collapses every failure to {"message"} + 500
    coarse_errors: bool = False

    # Logging
    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"

    # Server
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
