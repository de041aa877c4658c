"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden from the environment or a .env file
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults target a local MongoDB on 127.0.0.1:27017 (booksDB.books)
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    mongodb_url: str = "mongodb://127.0.0.1:27017"
    mongodb_database: str = "booksDB"
    mongodb_collection: str = "books"

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
