"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    api_base_url: str = "http://localhost:8080"
    api_key_header: str = "X-API-Key"
    credential_path: Path = Path.home() / ".lazycarbs" / "api_key"
    request_timeout_seconds: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        env_prefix="LAZYCARBS_",
        extra="ignore",
    )


def normalize_base_url(raw: str) -> str:
    """Strip whitespace and trailing slashes from a base URL."""
    cleaned = raw.strip().rstrip("/")
    if not cleaned:
        msg = "API base URL must not be empty"
        raise ValueError(msg)
    return cleaned
