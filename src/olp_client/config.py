"""
Configuration settings for the OLP client.

Settings are read from ``OLP_CLIENT_``-prefixed environment variables (or a
.env file) only when ``Settings()`` is instantiated, typically right before
``Client.from_settings``. Importing the package never reads the environment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OLP_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Logging ===
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches to JSON logs

    # === HTTP Transport ===
    HTTP_CONNECT_TIMEOUT: float = 10.0  # seconds
    HTTP_READ_TIMEOUT: float = 60.0  # seconds
    HTTP_MAX_CONNECTIONS: int = 20
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 5

    # === Retry ===
    MAX_RETRIES: int = 3  # 0 disables retries
    RETRY_INTERVAL_MILLIS: int = 1000  # Base backoff, doubled per retry
    MAX_RETRY_DELAY_MILLIS: int = 30000  # Cap for a single backoff wait

    # === Error Responses ===
    ERROR_BODY_EXCERPT_LIMIT: int = 1024  # chars kept from non-JSON error bodies
