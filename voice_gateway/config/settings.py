"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from voice_gateway.config.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_LIVE_MODEL,
    DEFAULT_LIVE_URL,
    DEFAULT_TARGET_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TRIGGER_TOKENS,
    DEFAULT_VOICE_NAME,
)


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Values are read when the instance is created, so tests can set environment
    variables and build a fresh ``Settings()``. ``.env`` files are loaded into
    the environment by ``voice_gateway.main``.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini Live
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API key")
    gemini_live_url: str = DEFAULT_LIVE_URL
    gemini_model: str = Field(default=DEFAULT_LIVE_MODEL, description="Default model id")
    gemini_temperature: float = DEFAULT_TEMPERATURE
    gemini_trigger_tokens: int = DEFAULT_TRIGGER_TOKENS
    gemini_target_tokens: int = DEFAULT_TARGET_TOKENS
    gemini_voice_name: str = DEFAULT_VOICE_NAME
    engine_connect_timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT, gt=0, description="Seconds to wait for the engine"
    )

    # Data Storage
    data_file: Path = Field(
        default=Path("data/gateway.json"),
        validation_alias=AliasChoices("data_file", "VOICE_GATEWAY_DATA_FILE"),
        description="JSON document with API keys and assistants",
    )

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
