"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

import logging
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_portal"

    # JWT Auth (30 day tokens)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30

    # Default admin, created on first admin login
    admin_username: str = "admin"
    admin_password: str = "admin123"
    admin_email: str = "admin@placementportal.com"

    # App
    log_level: int = logging.INFO
    log_dir: str = "logs"
    cors_origins: List[str] = ["*"]
    debug: bool = False

    @property
    def mongodb_url(self) -> str:
        """MongoDB URI with the database name appended (for display)."""
        return f"{self.mongodb_uri.rstrip('/')}/{self.mongodb_db}"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
