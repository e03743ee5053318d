"""
Configuration settings for the Moneytree LINK client.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from moneytree_link.retry.config import RetryConfig


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "moneytree-link"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Moneytree LINK ===
    MONEYTREE_ACCOUNT_NAME: str = "jp-api-staging"
    MONEYTREE_BASE_URL: Optional[str] = None  # Overrides https://<account>.getmoneytree.com/

    # === HTTP Transport ===
    HTTP_TIMEOUT: float = 30.0  # seconds, whole request
    HTTP_CONNECT_TIMEOUT: float = 5.0
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 100
    HTTP_KEEPALIVE_EXPIRY: float = 90.0

    # === Retry (HTTP 429) ===
    RETRY_MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_MS: int = 3000
    RETRY_ENABLED: bool = True

    def retry_config(self) -> RetryConfig:
        """Build the immutable RetryConfig for a client instance."""
        return RetryConfig(
            max_retries=self.RETRY_MAX_RETRIES,
            base_delay=self.RETRY_BASE_DELAY_MS / 1000.0,
            enabled=self.RETRY_ENABLED,
        )
