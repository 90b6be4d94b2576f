"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_NAME: str = "Pathwise"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENV: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./pathwise.db"
    DATABASE_ECHO: bool = False

    # AI (practice generation)
    OPENAI_API_KEY: str | None = None
    OPENAI_API_BASE_URL: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    PRACTICE_TEMPERATURE: float = 0.4

    # External tutor service (roadmaps, general chat, learning content)
    TUTOR_API_BASE_URL: str = "http://localhost:8001"
    TUTOR_API_TIMEOUT: float = 60.0

    # Identity forwarded by the auth proxy
    AUTH_EMAIL_HEADER: str = "X-Auth-Request-Email"
    AUTH_NAME_HEADER: str = "X-Auth-Request-User"
    GUEST_EMAIL: str = "guest@example.com"
    GUEST_NAME: str = "Guest"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
