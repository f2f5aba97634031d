"""Configuration models."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Main application configuration from environment variables."""

    # OpenAI API (summaries, takeaways, sentiment)
    openai_api_key: Optional[str] = Field(default=None)
    openai_model: str = "gpt-4o-mini"

    # Resend API (digest delivery)
    resend_api_key: Optional[str] = Field(default=None)
    resend_base_url: str = "https://api.resend.com"
    email_from: str = "InboxSage <digest@inboxsage.com>"
    test_email_from: str = "InboxSage <test@inboxsage.com>"

    # Public URL used for unsubscribe / preferences links
    app_url: str = "http://localhost:3000"

    # Database
    db_path: Path = Path("./inboxsage.db")

    # Scheduler
    enable_cron_jobs: bool = False
    scheduler_timezone: str = "UTC"
    max_concurrent_users: int = Field(default=10, gt=0)
    ai_batch_size: int = Field(default=20, gt=0)

    # Pipeline settings
    default_max_articles: int = Field(default=10, gt=0)
    digest_lookback_days: int = Field(default=7, gt=0)
    request_timeout_sec: int = Field(default=30, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    log_dir: Optional[Path] = None

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def unsubscribe_base_url(self) -> str:
        return f"{self.app_url.rstrip('/')}/unsubscribe"

    @property
    def preferences_url(self) -> str:
        return f"{self.app_url.rstrip('/')}/dashboard/settings"

    def validate_paths(self) -> None:
        """Validate and create necessary paths."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
