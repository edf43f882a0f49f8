"""
Plant recommender - settings from environment variables (or a local .env).
Loaded once per process; call get_settings.cache_clear() after changing env in tests.

Required for recommendations:
    - OPENWEATHER_API_KEY: OpenWeatherMap key (checked at startup)

Optional:
    - TREFLE_TOKEN: plant catalog token; without it catalog searches come back empty
    - PROVIDER_TIMEOUT_SECONDS, CATALOG_RESULT_LIMIT, CATALOG_MAX_WORKERS
    - LOG_LEVEL, LOG_JSON
    - AUTH_SECRET_KEY, AUTH_USERNAME, AUTH_PASSWORD, ACCESS_TOKEN_EXPIRE_MINUTES
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigurationError


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # Providers
    openweather_api_key: Optional[str] = Field(default=None, description="OpenWeatherMap API key")
    trefle_token: Optional[str] = Field(default=None, description="Trefle plant catalog token")
    provider_timeout_seconds: int = Field(default=10, ge=1, description="Per-request provider timeout")
    catalog_result_limit: int = Field(default=10, ge=1, description="Results requested per search term")
    catalog_max_workers: int = Field(default=6, ge=1, description="Concurrent catalog searches")

    # Logging
    log_level: str = Field(default="INFO", description="Minimum log level")
    log_json: bool = Field(default=False, description="JSON log output")

    # Auth
    auth_secret_key: str = Field(default="plant-recommender-dev-secret-change-in-production")
    auth_username: str = Field(default="gardener")
    auth_password: str = Field(default="olive2025")
    access_token_expire_minutes: int = Field(default=60, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return str(v).strip().upper()

    def require_weather_key(self) -> str:
        """Weather credentials are mandatory; fail before any network call."""
        if not self.openweather_api_key:
            raise ConfigurationError("OPENWEATHER_API_KEY is not set")
        return self.openweather_api_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings singleton."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
