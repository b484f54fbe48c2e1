from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Local dev: load from .env automatically.
    # In production: you typically inject real env vars instead.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Env vars:
    # - APP_NAME (optional, reported by /healthz)
    # - LOG_LEVEL (optional, e.g. DEBUG, INFO, WARNING)
    # - API_BASE_URL (used by the API client and the Streamlit UI)
    # - API_TIMEOUT_SECONDS (client request timeout)
    app_name: str = Field(default="user-record-store", validation_alias="APP_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    api_base_url: str = Field(default="http://localhost:8000", validation_alias="API_BASE_URL")
    api_timeout_seconds: float = Field(default=10.0, validation_alias="API_TIMEOUT_SECONDS")

    def model_post_init(self, __context):  # type: ignore[override]
        self.log_level = (self.log_level or "INFO").upper().strip()
        self.api_base_url = (self.api_base_url or "").rstrip("/")


def get_settings() -> Settings:
    """Load settings from environment.

    Keep this as the single canonical constructor for Settings(). FastAPI
    dependencies and tests can override/monkeypatch this function.
    """
    return Settings()
