"""Application configuration module."""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUESTIONS_FILE = str(Path(__file__).resolve().parent / "data" / "questions.json")

VALID_BACKENDS = ("sql", "memory")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "PMP Quiz"

    # Question catalog
    QUESTIONS_FILE: str = DEFAULT_QUESTIONS_FILE
    SHUFFLE_QUESTIONS: bool = True
    SHUFFLE_SEED: Optional[int] = None

    # Session storage
    SESSION_BACKEND: str = "sql"
    SESSION_COOKIE_NAME: str = "quiz_id"

    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    SQL_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_FILE: Optional[str] = None

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    RELOAD: bool = False

    @field_validator("SESSION_BACKEND")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate the session store backend"""
        v = v.lower()
        if v not in VALID_BACKENDS:
            raise ValueError(f"Invalid session backend: {v}. Must be one of {list(VALID_BACKENDS)}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level"""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {list(VALID_LOG_LEVELS)}")
        return v.upper()


# Create global settings instance
settings = Settings()
