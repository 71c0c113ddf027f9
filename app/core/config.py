# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - JWT_SECRET (signing secret for access / refresh / reset tokens)

    Optional:
      - SUPABASE_URL + SUPABASE_SERVICE_ROLE_KEY (media uploads)
      - GOOGLE_CLIENT_ID (Google sign-in)
      - FRONTEND_URL (used to build password reset links)
    """

    PROJECT_NAME: str = "Hero Greetings API"
    API_V1_STR: str = "/api/v1"

    # Database
    DATABASE_URL: str

    # Supabase storage (uploads only)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "greetings"

    # Tokens issued by this backend
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    PASSWORD_RESET_EXPIRE_MINUTES: int = 30

    # Email confirmation codes
    OTP_EXPIRE_MINUTES: int = 15

    # Google sign-in
    GOOGLE_CLIENT_ID: str | None = None

    FRONTEND_URL: str = "http://localhost:3000"
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
