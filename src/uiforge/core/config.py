"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UIFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Credentials
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", os.getenv("API_KEY", "")),
        description="Gemini API key",
    )
    figma_api_key: str = Field(
        default_factory=lambda: os.getenv("FIGMA_API_KEY", ""), description="Figma access token"
    )

    # Generation
    max_concurrency: int = Field(default=9, gt=0, description="Max in-flight generation calls")
    request_timeout: float = Field(default=193.333, gt=0, description="Per-attempt timeout (seconds)")
    max_attempts: int = Field(default=5, gt=0, description="Attempts per generation")
    base_delay: float = Field(default=1.233, ge=0.0, description="Backoff base delay (seconds)")
    max_jitter: float = Field(default=1.0, ge=0.0, description="Max random backoff jitter (seconds)")
    edit_model: str = Field(default="flash", description="Model key used for AI chat edits")

    # Playground defaults
    default_temperature: float = Field(default=0.9, ge=0.0, le=1.0, description="Model temperature")
    default_batch_size: int = Field(default=3, ge=1, le=9, description="Outputs per batch round")

    # Source acquisition
    page_proxy_url: str = Field(
        default="https://api.allorigins.win/raw", description="CORS proxy used to fetch pages"
    )
    page_fetch_timeout: float = Field(default=30.0, gt=0, description="Page fetch timeout")
    figma_api_url: str = Field(default="https://api.figma.com/v1", description="Figma REST API")
    figma_scale: int = Field(default=2, ge=1, le=4, description="Figma export scale")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
