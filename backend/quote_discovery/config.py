"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Engine caps (history, suggestions, popular tables) default to the product values

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - storage_backend "memory" runs without a database (tests, demos); state is lost on restart
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quote_discovery.core.domain_types import (
    DEFAULT_SEARCH_FIELDS, FILTERED_SEARCH_LABEL, HISTORY_CAPACITY,
    POPULAR_LIMIT, SUGGESTION_LIMIT, SearchField,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://quotes:quotes@db:5432/quotes"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Persistence
    storage_backend: Literal["database", "memory"] = "database"
    history_key: str = "search-history"
    saved_searches_key: str = "saved-searches"
    analytics_key: str = "search-analytics"

    # Engine
    history_capacity: int = HISTORY_CAPACITY
    suggestion_limit: int = SUGGESTION_LIMIT
    popular_limit: int = POPULAR_LIMIT
    search_fields: list[SearchField] = list(DEFAULT_SEARCH_FIELDS)
    filtered_search_label: str = FILTERED_SEARCH_LABEL

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
