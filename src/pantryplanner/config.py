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

    # Database
    database_url: str = "postgresql+asyncpg://localhost/pantryplanner"

    # External recipe sources, tried in order when local recipes run out
    external_providers: list[str] = ["mealdb"]
    mealdb_api_key: str = "1"  # Default test key
    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1"
    mealdb_timeout: float = 30.0

    # Meal planning
    max_meal_plan_days: int = 14

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def mealdb_url(self) -> str:
        """Get the full MealDB API URL with API key."""
        return f"{self.mealdb_base_url}/{self.mealdb_api_key}"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
