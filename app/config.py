import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Flutter web dev server
        "http://localhost:8000",  # Backend server
    ]

    # Firebase settings
    # Explicit Firebase Admin SDK credentials JSON path
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "./firebase-service-account.json")
    # Development only: trust X-User-ID header when no bearer token is sent
    ALLOW_USER_ID_HEADER: bool = False

    # AI answer evaluation
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    EVALUATION_MODEL: str = "gpt-4o-mini"

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./qoomy.db")

    # Redis settings (rate limit storage)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))

    # Push notification settings
    ANDROID_CHANNEL_ID: str = "qoomy_messages"
    NOTIFICATION_TAG_PREFIX: str = "qoomy_unread"
    NOTIFICATION_TITLE: str = "Qoomy"
    PREVIEW_MAX_LENGTH: int = 100
    ANSWER_PLACEHOLDER: str = "Submitted an answer"
    # Platform assumed for the single pre-multi-device token on the user row
    LEGACY_TOKEN_PLATFORM: str = "android"

    # Finished room cleanup
    CLEANUP_ENABLED: bool = True
    ROOM_RETENTION_HOURS: int = 24
    ROOM_CLEANUP_INTERVAL_HOURS: int = 24

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()


def get_database_url() -> str:
    """Return DATABASE_URL with Heroku-style postgres URLs mapped to asyncpg."""
    url = settings.DATABASE_URL
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url
