from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str

    # Reminders
    reminder_window_minutes: int = 5
    dispatch_secret: str | None = None  # Required X-Dispatch-Secret header when set

    # OpenAI (optional tag suggestions)
    openai_api_key: str | None = None
    enrichment_model: str = "gpt-5-nano"
    enrichment_model_reasoning: str = "medium"

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.openai_api_key)


settings = Settings()
