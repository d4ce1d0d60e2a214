"""
core/config.py
----------------

Application configuration module.

Defines strongly-typed settings loaded from the environment using
``pydantic-settings``. These settings control the Harvest base URI,
HTTP timeouts and retries, the host default page size and the
timezone used when resolving ``[date:...]`` tokens. Values can be
overridden via environment variables at deployment time.
"""

from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables are prefixed with ``HARVEST_``.  For example,
    to override the default request timeout set ``HARVEST_HTTP_TIMEOUT=15``.
    """

    # Harvest API
    base_uri: str = Field("https://api.harvestapp.com/v2/", description="Base URI for Harvest API requests.")
    user_agent: str = Field("Harvest Import", description="User-Agent sent with every request.")

    # HTTP client settings
    http_timeout: float = Field(10.0, description="Hard timeout for HTTP requests in seconds.")
    http_max_retries: int = Field(3, ge=0, description="Maximum number of retries for idempotent operations (GET).")
    http_backoff_factor: float = Field(0.5, description="Backoff factor for exponential retry delays.")

    # Pagination
    default_limit_count: int = Field(10, ge=1, description="Page size used when a source has no throttle.")

    # Token resolution
    date_timezone: str = Field("UTC", description="Timezone applied to [date:...] token expressions.")

    model_config = SettingsConfigDict(env_prefix="HARVEST_", env_file=None, case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the application settings.

    Using a cache prevents expensive environment parsing on every call.
    """
    return Settings()
