from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Supabase Postgres connection string)
      - AUTH_JWT_SECRET (key used to verify identity provider tokens)

    Optional:
      - PAYMENT_SIMULATED_DELAY_SECONDS / PAYMENT_SUCCESS_RATE
      - DB_CONNECT_TIMEOUT_SECONDS / DB_STATEMENT_TIMEOUT_MS
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DB_CONNECT_TIMEOUT_SECONDS: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 15000

    # JWT verification (backend-side)
    AUTH_JWT_SECRET: str
    AUTH_JWT_ALG: str = "HS256"

    # Catalog
    CATALOG_PAGE_SIZE: int = 12

    # Test-mode payment
    PAYMENT_SIMULATED_DELAY_SECONDS: float = 2.0
    PAYMENT_SUCCESS_RATE: float = 0.9

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
