"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

LOCAL_FRONTEND_ORIGIN = "http://localhost:5173"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str | None = None
    supabase_bucket: str = "generations"
    openai_api_key: str | None = None
    openai_text_model: str = "gpt-5.2"
    openai_image_model: str = "gpt-image-1"
    openai_image_size: str = "1024x1024"
    frontend_url: str = LOCAL_FRONTEND_ORIGIN
    max_body_bytes: int = 10 * 1024 * 1024
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 200
    auth_retry_attempts: int = 3
    auth_retry_delay_seconds: float = 1.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return true when running with production cookie and CORS rules."""
        return self.environment == "production"

    @property
    def persistence_configured(self) -> bool:
        """Return true when storage and the generations table are reachable."""
        return bool(self.supabase_url and self.supabase_service_key)


def parse_origins(raw: str | None, *, include_local: bool = False) -> list[str]:
    """Parse a comma-separated list of allowed CORS origins."""
    origins: list[str] = []
    for chunk in (raw or "").split(","):
        value = chunk.strip().rstrip("/")
        if value and value not in origins:
            origins.append(value)
    if include_local and LOCAL_FRONTEND_ORIGIN not in origins:
        origins.append(LOCAL_FRONTEND_ORIGIN)
    return origins
