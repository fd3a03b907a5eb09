"""
Configuration for the Scrum Delivery Simulator.

Every value can be set from the environment (or a ``.env`` file) through
pydantic-settings. Simulation defaults use the ``SIM_`` prefix.
"""

from datetime import datetime
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SimulationSettings(BaseSettings):
    """Defaults applied when a request leaves a value open."""

    model_config = SettingsConfigDict(env_prefix="SIM_")

    # used when a request carries no seed; None draws a fresh one per run
    default_seed: Optional[int] = Field(default=None, ge=0)
    max_batch_runs: int = Field(default=50, ge=1, le=1000)
    # used when a request carries no start date; None means today at midnight
    start_date: Optional[datetime] = None


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="")

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    json_format: bool = Field(default=True, alias="JSON_LOGS")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {list(LOG_LEVELS)}")
        return level


class SecuritySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="")

    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="CORS_ORIGINS",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """Application settings; sub-sections are read from the environment on access."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Scrum Delivery Simulator", alias="APP_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    workers: int = Field(default=4, alias="WORKERS")

    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")

    @property
    def simulation(self) -> SimulationSettings:
        return SimulationSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @property
    def security(self) -> SecuritySettings:
        return SecuritySettings()


@lru_cache()
def get_settings() -> Settings:
    """Settings are loaded once per process."""
    return Settings()
