"""
Library settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings with defaults for local development."""

    model_config = SettingsConfigDict(
        env_prefix="CRUDKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./crudkit.db"
    database_echo: bool = False

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Search
    default_search_limit: int = 100

    def validate_production(self) -> list[str]:
        """
        Check settings that must not keep their development values in production.
        Returns a list of problems. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.database_echo:
                errors.append("DATABASE_ECHO must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()
