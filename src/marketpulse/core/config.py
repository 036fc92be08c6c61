"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

import base64
import binascii
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Survey identifiers are unsigned 32-bit integers starting at 1
MAX_SURVEY_ID = 2**32 - 1


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "MarketPulse"
    APP_ENV: str = "development"

    # Platform identity
    # Principal recorded as platform owner when none is passed explicitly
    PLATFORM_OWNER: str | None = None
    # Principal the ledger itself holds; receives the self-access grant on every sealed field
    STORAGE_PRINCIPAL: str = "marketpulse:ledger"

    # Sealing
    # Base64-encoded 256-bit AES key used to seal response fields
    # Generate with: python -c "from marketpulse.core.sealing import generate_seal_key; print(generate_seal_key())"
    SEAL_KEY: str | None = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("SEAL_KEY")
    @classmethod
    def validate_seal_key(cls, v: str | None, info: Any) -> str | None:
        """Validate that a configured seal key decodes to 32 bytes."""
        if v is None:
            return v
        try:
            raw = base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"{info.field_name} must be base64 encoded") from e
        if len(raw) != 32:
            raise ValueError(f"{info.field_name} must decode to 32 bytes, got {len(raw)}")
        return v

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "test", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {sorted(allowed)}")
        return v

    @property
    def is_production_like(self) -> bool:
        """Staging and production require real key material."""
        return self.APP_ENV in ("production", "staging")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
