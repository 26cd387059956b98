"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have defaults suitable for local development except the
    Google Cloud credentials, which must be provided to run the cleanup job
    against a real bucket.

    Environment Variables:
        MONGO_URI: MongoDB connection string
        MONGO_DB_NAME: Database holding the upload collection
        MONGO_COLLECTION: Upload record collection (default 'images')
        GOOGLE_CLOUD_PROJECT_ID: GCS project
        GOOGLE_CLOUD_CLIENT_EMAIL: Service account email
        GOOGLE_CLOUD_PRIVATE_KEY: Service account key (escaped newlines allowed)
        GOOGLE_CLOUD_BUCKET_NAME: Bucket holding processed images
        RETENTION_WINDOW_HOURS: Maximum upload age before deletion (default 6)
        RETENTION_SCHEDULE_CRON: Cleanup cadence (default hourly, on the hour)
        RETENTION_SCHEDULER_ENABLED: Start the scheduler with the app
        STORE_CALL_TIMEOUT_SECONDS: Timeout for each store call during a pass
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Metadata store
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "imagepro"
    MONGO_COLLECTION: str = "images"

    # Object store
    GOOGLE_CLOUD_PROJECT_ID: Optional[str] = None
    GOOGLE_CLOUD_CLIENT_EMAIL: Optional[str] = None
    GOOGLE_CLOUD_PRIVATE_KEY: Optional[str] = None
    GOOGLE_CLOUD_BUCKET_NAME: str = "compressed-images-bucket"

    # Retention
    RETENTION_WINDOW_HOURS: float = 6
    RETENTION_SCHEDULE_CRON: str = "0 * * * *"
    RETENTION_SCHEDULER_ENABLED: bool = True
    STORE_CALL_TIMEOUT_SECONDS: float = 30.0

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"

    @property
    def retention_window(self) -> timedelta:
        return timedelta(hours=self.RETENTION_WINDOW_HOURS)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
