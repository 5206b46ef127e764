"""
Application configuration from environment variables.
Settings class using pydantic-settings with optional validation.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

# Resolve .env from backend root so it loads when running from backend/ or project root
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment and .env.
    All fields optional with defaults for local dev; validate for production.
    """

    # Application
    ENVIRONMENT: str = "development"
    PORT: int = 4000
    # Store as string so env never triggers json.loads; parsed in cors_origins_list.
    cors_origin: str = Field(
        default="*",
        description="Comma-separated origins or JSON array",
        validation_alias="CORS_ORIGIN",
    )

    @field_validator("cors_origin", mode="before")
    @classmethod
    def normalize_cors_origin(cls, v: object) -> str:
        """Ensure we always have a string (empty env means any origin)."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return "*"
        if isinstance(v, list):
            return ",".join(str(x).strip() for x in v if str(x).strip())
        return str(v).strip()

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="",
        description="Full SQLAlchemy async URL; overrides the DB_* parts when set",
        validation_alias="DATABASE_URL",
    )
    DB_SERVER: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "opportunities"
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_ENCRYPT: bool = True
    DB_POOL_MAX: int = Field(default=10, ge=1)
    DB_POOL_IDLE_TIMEOUT: int = Field(default=30, ge=1, description="Seconds before idle connections are recycled")
    DB_CREATE_SCHEMA: bool = False

    @field_validator("database_url", "DB_SERVER", "DB_NAME", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGIN from comma-separated or JSON array string."""
        raw = (self.cors_origin or "").strip()
        if not raw:
            return ["*"]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return [x.strip() for x in parsed if isinstance(x, str) and x.strip()] or ["*"]
        return [x.strip() for x in raw.split(",") if x.strip()] or ["*"]

    @property
    def database_url_resolved(self) -> URL:
        """DATABASE_URL when given, otherwise an asyncpg URL built from the DB_* parts."""
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER or None,
            password=self.DB_PASSWORD or None,
            host=self.DB_SERVER,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url_resolved.get_backend_name() == "sqlite"

    @property
    def connect_args(self) -> dict[str, Any]:
        """Driver connect arguments; TLS is only meaningful for networked databases."""
        if self.is_sqlite or not self.DB_ENCRYPT:
            return {}
        return {"ssl": "require"}

    def validate_for_production(self) -> None:
        """
        Call to validate that required env vars are set (e.g. on startup in production).
        Raises ValueError with missing keys.
        """
        if self.database_url:
            return
        missing: List[str] = []
        if not self.DB_SERVER:
            missing.append("DB_SERVER")
        if not self.DB_NAME:
            missing.append("DB_NAME")
        if not self.DB_USER:
            missing.append("DB_USER")
        if not self.DB_PASSWORD:
            missing.append("DB_PASSWORD")
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
