"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    database_url: str = "sqlite+aiosqlite:///./bookreviews.db"
    db_timeout_seconds: float = 30.0
    reset_db_on_startup: bool = False
    secret_key: str = "dev-secret-key-change-me-in-production"
    jwt_algorithm: str = "HS512"
    access_token_expire_minutes: int = 60 * 24 * 7
    google_client_id: str = ""  # empty disables the audience check
    google_tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo"
    http_timeout_seconds: float = 10.0
    cors_origins: list[str] = ["http://localhost:5173"]
    api_prefix: str = ""  # e.g. "/api"

    model_config = {"env_file": ".env"}


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
