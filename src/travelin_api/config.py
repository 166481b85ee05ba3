"""Application configuration."""

import json

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    database_url: str = "postgresql+asyncpg://localhost/travelin"
    database_url_sync: str = "postgresql://localhost/travelin"

    session_expire_days: int = 7

    # Auth mode: "dev" uses X-User-Id header, "production" uses Bearer token
    auth_mode: str = "dev"

    # Public base URL used to build self/pagination links
    base_url: str = "http://localhost:8000"
    api_prefix: str = "/v1"

    # Search and pagination limits
    default_page_limit: int = 10
    max_page_limit: int = 100
    default_radius_km: float = 1.0
    max_radius_km: float = 20.0

    log_level: str = "info"

    # CORS configuration
    frontend_url: str = "http://localhost:5173"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string (JSON or comma-separated) or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


settings = Settings()
