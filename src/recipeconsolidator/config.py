"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Persistence (key/value table)
    database_url: str = "sqlite:///./recipeconsolidator.db"
    storage_key_prefix: str = "recipeConsolidator_"

    # Defaults applied when a persisted preference is absent or malformed
    default_unit_system: str = "imperial"

    # Optional bundled recipe file offered by "load preloaded recipes"
    preloaded_recipes_path: str | None = None

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
