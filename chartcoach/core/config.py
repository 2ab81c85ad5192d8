"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_enabled: Turn the slowapi limiter on or off.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for LLM-backed endpoints.
        database_url: Postgres connection string. Read from the first of
            POSTGRES_URL_NON_POOLING, POSTGRES_URL, DATABASE_URL that is set.
        persistence_enabled: Explicit persistence switch. When unset,
            persistence is on exactly when a connection string exists.
        history_limit: Maximum rows returned by chart history queries.
        openai_api_key: API key for the hosted LLM provider.
        openai_base_url: Base URL of an OpenAI-compatible API.
        llm_model: Chat model used for text and JSON generation.
        llm_vision_model: Chat model used when chart images are attached.
        llm_timeout_seconds: Timeout for a single provider round trip.
        llm_max_tokens: Upper bound on completion tokens.
        vercel_git_commit_sha: Deployed commit, surfaced by /version.
        vercel_git_commit_ref: Deployed branch, surfaced by /version.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Chart Coach"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "POSTGRES_URL_NON_POOLING",
            "POSTGRES_URL",
            "DATABASE_URL",
        ),
    )
    persistence_enabled: Optional[bool] = None
    history_limit: int = 50

    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    llm_model: str = "gpt-4.1-mini"
    llm_vision_model: str = "gpt-4.1-mini"
    llm_timeout_seconds: float = 60.0
    llm_max_tokens: int = 1500

    vercel_git_commit_sha: str = "dev"
    vercel_git_commit_ref: str = "local"

    def get_database_url(self) -> Optional[str]:
        """Return the effective SQLAlchemy URL, or None when unset.

        Hosted Postgres providers still hand out ``postgres://`` URLs,
        which SQLAlchemy no longer accepts as a dialect name.
        """
        url = (self.database_url or "").strip()
        if not url:
            return None
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        return url

    def is_persistence_enabled(self) -> bool:
        """Resolve the persistence switch against the connection string."""
        if self.persistence_enabled is not None:
            return self.persistence_enabled and self.get_database_url() is not None
        return self.get_database_url() is not None


settings = Settings()
