"""Configuration for task-tracker, loaded from environment variables or `.env`."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from task_tracker.errors import ConfigError

DEFAULT_CONFIG_DIR = Path.home() / ".task-tracker"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Hosted backend
    supabase_url: Optional[str] = Field(default=None, description="Project URL, e.g. https://xyz.supabase.co")
    supabase_anon_key: Optional[str] = Field(default=None, description="Public anon API key")
    tasks_table: str = Field(default="tasks", description="Table holding task rows")
    uploads_bucket: str = Field(default="uploads", description="Storage bucket for task media")

    # Client behaviour
    http_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    refresh_margin_seconds: int = Field(
        default=60, description="Refresh the access token this many seconds before it expires"
    )

    # Local state (CLI session file)
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR, validation_alias="task_tracker_config_dir")

    @property
    def session_file(self) -> Path:
        return self.config_dir / "session.json"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Return a required setting or raise ConfigError naming its env var."""
        value = getattr(self, field_name)
        if not value:
            raise ConfigError(
                f"{service_name} not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


def get_settings() -> Settings:
    return Settings()
