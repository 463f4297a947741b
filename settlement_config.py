"""Settlement service configuration, loaded from environment variables or a .env file.

Only the boundary reads these settings (HTTP layer, shift close defaults, export
script); the calculation functions take every value as an explicit argument.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SETTLEMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Split applied to staff members with no configured percentages
    default_percent_master: float = 60.0
    default_percent_salon: float = 40.0

    default_payment_mode: Literal["percent_with_guarantee", "percent_only", "fixed_per_shift", "custom"] = (
        "percent_with_guarantee"
    )

    # Comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    log_level: str = "INFO"

    @field_validator("default_percent_master", "default_percent_salon")
    @classmethod
    def validate_percent(cls, v: float) -> float:
        if v < 0 or v > 100:
            raise ValueError("default percentages must be between 0 and 100")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
