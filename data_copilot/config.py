"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - The Anthropic credential is optional at load time; the assistant client
      refuses to start without it

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://copilot:copilot@db:5432/copilot"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_schema: bool = True
    seed_demo_data: bool = False

    # Anthropic
    anthropic_api_key: str | None = None
    anthropic_base_url: str | None = None
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 300
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 60_000

    # Assistant
    assistant_model: str = "claude-sonnet-4-5"
    assistant_streaming: bool = True
    assistant_max_tokens: int = 4096
    assistant_max_tool_iterations: int = 10
    log_tool_calls: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
