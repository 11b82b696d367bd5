"""Application configuration with environment validation.

Usage:
    from heatsheet.config import get_settings

    settings = get_settings()
    print(settings.default_lanes_available)

Settings are read from environment variables and an optional .env file.
The Supabase credentials are only needed by the DAO layer; the assignment
engine itself runs without them.
"""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Path | None:
    """Find .env file in the current directory or the project root."""
    if Path(".env").exists():
        return Path(".env")
    # config.py -> heatsheet -> src -> project_root
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        return env_file
    return None


class Environment(StrEnum):
    """Application environment."""

    LOCAL = "local"
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class LogFormat(StrEnum):
    """Log output format."""

    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Environment.LOCAL

    # Supabase (document store for meets, rosters and meet events)
    supabase_url: str | None = Field(default=None, description="Supabase project URL")
    supabase_key: SecretStr | None = Field(default=None, description="Supabase anon/public key")
    supabase_service_role_key: SecretStr | None = Field(
        default=None, description="Supabase service role key (bypasses RLS, for admin tools)"
    )

    # Used when a stored meet document has no lane count
    default_lanes_available: int = Field(default=8, ge=1, le=12)

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: LogFormat | None = Field(
        default=None, description="Log output format; json in production when unset"
    )

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def has_supabase(self) -> bool:
        """Check if Supabase credentials are configured."""
        return bool(self.supabase_url and self.supabase_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    To reload, clear the cache:
        get_settings.cache_clear()
    """
    return Settings()
