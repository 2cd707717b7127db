"""Dashboard client configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings loaded from ``EMPLOYEE_DASHBOARD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EMPLOYEE_DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = "http://localhost:8081/api/employees"
    timeout_seconds: float = Field(default=10.0, gt=0)

    # Freshness window for opt-in response caching
    cache_ttl_seconds: float = Field(default=60.0, ge=0)

    # Delay before the quick-search box issues a request
    search_debounce_ms: int = Field(default=300, ge=0)

    preferences_path: Path = Path.home() / ".employee_dashboard" / "preferences.json"


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
