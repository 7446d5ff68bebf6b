"""
Configuration for the PSR AI Console.

Everything the console needs to reach the backend and pace its background
refreshes:
- REST base URL and request timeouts
- Poll intervals for training jobs, health checks and pending counts
- Delay before the authoritative re-fetch that follows an optimistic update
- Upload and chat limits
"""
import logging

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "PSR AI Console"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend (reads NEXT_PUBLIC_API_URL too, so existing .env files keep working)
    api_base_url: str = Field(
        default="http://localhost:8000/api/v1",
        validation_alias=AliasChoices("PSR_API_BASE_URL", "NEXT_PUBLIC_API_URL"),
    )
    request_timeout_seconds: float = 30.0
    chat_timeout_seconds: float = 120.0
    upload_timeout_seconds: float = 300.0

    # Polling
    training_poll_interval_seconds: float = 10.0
    status_poll_interval_seconds: float = 30.0
    optimistic_refresh_delay_seconds: float = 0.5

    # Training uploads
    allowed_upload_extensions: list[str] = [
        ".pdf", ".doc", ".docx", ".txt", ".json", ".csv",
    ]
    max_upload_size_mb: int = 50

    # Chat
    chat_max_messages: int = 100
    chat_search_limit: int = 5
    welcome_message: str = (
        "Hello! I'm your AI research assistant. How can I help you today?"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "PSR_"
        extra = "ignore"


settings = Settings()


def configure_logging(level: str | None = None):
    """Set up root logging once for the Streamlit process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
