"""
Application Settings - Pydantic-based configuration management.

Loads settings from environment variables with validation and type coercion.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # LLM Providers
    # -------------------------------------------------------------------------
    openai_api_key: str = Field(default="", description="OpenAI API key")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    google_api_key: str = Field(default="", description="Google AI (Gemini) API key")

    openai_model: str = Field(default="gpt-4o", description="OpenAI chat model")
    anthropic_model: str = Field(
        default="claude-3-5-sonnet-20241022",
        description="Anthropic chat model",
    )
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini chat model")

    llm_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single vendor call",
    )

    # -------------------------------------------------------------------------
    # AI Features
    # -------------------------------------------------------------------------
    default_suggestion_count: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Feature suggestions generated when the caller gives no count",
    )

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------
    environment: str = Field(default="development", description="Environment (development/production)")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Singleton Settings instance.
    """
    return Settings()
