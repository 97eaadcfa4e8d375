"""Application configuration — reads from environment variables and Docker Swarm secrets."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


def _read_secret(name: str) -> str | None:
    """Read a Docker Swarm secret from /run/secrets/."""
    secret_path = Path(f"/run/secrets/{name}")
    if secret_path.exists():
        return secret_path.read_text().strip()
    return None


class Settings(BaseSettings):
    """Application settings with env var and secret support.

    ``LATITUDE_API_KEY`` and ``LATITUDE_PROJECT_ID`` are the only required values.
    """

    latitude_api_key: str = ""
    latitude_project_id: str = ""
    latitude_base_url: str = "https://gateway.latitude.so/api/v3"
    request_timeout: float = 30.0
    prompts_dir: str = "prompts"
    prompt_extension: str = ".promptl"
    cache_ttl_seconds: float = 60.0
    port: int = 8400
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Override with Docker Swarm secrets if available
        if secret := _read_secret("latitude_api_key"):
            self.latitude_api_key = secret
        if secret := _read_secret("latitude_project_id"):
            self.latitude_project_id = secret


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
