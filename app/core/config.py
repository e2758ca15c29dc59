from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.version import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production", "test"] = "production"
    APP_NAME: str = "Cardex vCard"
    REDIS_URL: str = "redis://redis:6379/0"
    # Maximum number of connections Redis client will open per process
    REDIS_MAX_CONNECTIONS: int = 20
    REDIS_PROFILE_KEY: str = "cardex:"

    # Sync identifier prefix, combined with the card id
    UID_PREFIX: str = "cardex-"
    VCARD_PRODID: str = "-//Cardex//vCard Generator//EN"
    # Reject cards that are not published yet
    REQUIRE_PUBLISHED: bool = False
    # Base of the permanent vcard_url recorded on published cards
    PUBLIC_BASE_URL: str = ""

    # Photo embedding
    PHOTO_FETCH_TIMEOUT_SECONDS: float = 8.0
    PHOTO_FETCH_MAX_RETRIES: int = 1
    PHOTO_MAX_BYTES: int = 5 * 1024 * 1024
    # Emit PHOTO;VALUE=uri when the inline fetch fails
    PHOTO_URI_FALLBACK: bool = False


settings = Settings()

APP_VERSION = __version__
