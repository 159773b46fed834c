"""
ClipQA Configuration
Centralized settings management using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "ClipQA"
    debug: bool = False
    app_version: str = "1.0.0"

    # ==========================================================================
    # Storage
    # ==========================================================================
    data_dir: str = Field(default="data", description="Directory holding the SQLite database")
    database_name: str = Field(default="clipqa.db", description="SQLite database file name")

    # ==========================================================================
    # Clip Policy
    # ==========================================================================
    min_video_duration: int = Field(default=10, ge=10, description="Shortest accepted video in seconds")
    max_video_duration: int = Field(default=1020, ge=10, description="Longest accepted video in seconds")
    user_questions_limit: int = Field(default=50, ge=1, le=500, description="Cap on a user's question listing")

    # ==========================================================================
    # Security
    # ==========================================================================
    secret_key: str = Field(default="change-me-in-production", description="Token signing key")
    token_ttl_hours: int = Field(default=24 * 7, ge=1, description="Bearer token lifetime")
    cors_allowed_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
