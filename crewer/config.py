"""
Configuration management for Crewer
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Crewer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./crewer.db"

    # Legacy migration
    DEFAULT_PRODUCTION_COLOR: str = "#3b82f6"
    AUTO_MIGRATE_ON_ACCESS: bool = True  # migrate lazily on first productions listing

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
