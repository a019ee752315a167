"""
Centralized application configuration.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Halo Leads"
    debug: bool = False
    cors_origins: str = ""
    public_base_url: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite:///./halo_leads.db"

    # JWT Authentication
    jwt_secret_key: str = "your-super-secret-key-change-in-production-min-32-chars"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Google Geocoding
    google_maps_api_key: str = ""
    geocode_api_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    geocode_timeout_seconds: float = 10.0
    geocode_concurrency: int = 4
    geocode_request_delay_seconds: float = 0.1

    # Duplicate suppression windows
    lead_dedup_window_minutes: int = 60
    marketing_dedup_window_hours: int = 24

    # Slug allocation
    slug_max_attempts: int = 50
    slug_insert_retries: int = 3

    # Notifications (webhook that delivers the emails)
    notification_webhook_url: str = ""
    marketing_notification_email: str = "kelly@haloleadgen.com"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
