from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(str, Enum):
    DEV = "dev"
    HML = "hml"
    PROD = "prod"


class Settings(BaseSettings):
    APP_ENV: Env = Env.DEV
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite:///./roster.db"
    # create_all + ping on startup; disable when alembic owns the schema
    CREATE_SCHEMA_ON_STARTUP: bool = True

    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    # ICU collation used for case folding on PostgreSQL (ignored on SQLite)
    SEARCH_COLLATION: str | None = "th-x-icu"

    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# cria instância global
settings = Settings()
