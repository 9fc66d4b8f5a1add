"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

import os

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY") or ""
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_MAX_RETRIES: int = 2
    GEMINI_RETRY_BASE_SECONDS: float = 0.5
    GEMINI_RETRY_MAX_SECONDS: float = 4.0
    GEMINI_REQUEST_TIMEOUT_SECONDS: float = 30.0

    SUMMARY_DEFAULT_WORDS: int = 100
    SUMMARY_MAX_WORDS: int = 1000
    SUMMARY_TEMPERATURE: float = 0.4
    SUMMARY_MAX_OUTPUT_TOKENS: int = 1024

    STUDY_GUIDE_TEMPERATURE: float = 0.7
    STUDY_GUIDE_MAX_OUTPUT_TOKENS: int = 2048
    STUDY_GUIDE_TIMEOUT_SECONDS: float = 40.0

    NOTE_TITLE_MAX_CHARS: int = 100
    SESSION_TTL_SECONDS: int = 7 * 24 * 3600

    DATABASE_PATH: str = "database/notes.db"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
