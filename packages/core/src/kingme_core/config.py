"""Configuration for kingme-core.

Pydantic Settings-based configuration with environment variable support.
Engine constants (the frequency table, health and life-stage thresholds)
are part of the behaviour contract and live in their modules, not here.

Usage:
    from kingme_core.config import KingMeSettings

    settings = KingMeSettings()
    configure_logging(settings)

Environment Variables:
    KINGME_ENV: Environment name (development, staging, production, test)
    KINGME_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    KINGME_LOG_FORMAT: Log renderer (json, console)
    KINGME_IDLE_ASSET_APY: Yield assumed for idle crypto holdings
"""

from decimal import Decimal
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    """Supported log renderers."""

    JSON = "json"
    CONSOLE = "console"


class KingMeSettings(BaseSettings):
    """Root configuration for kingme-core."""

    model_config = SettingsConfigDict(
        env_prefix="KINGME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Render logs as JSON lines or for the console",
    )
    idle_asset_apy: Decimal = Field(
        default=Decimal("0.08"),
        ge=0,
        le=1,
        description="Yield assumed for idle crypto when estimating opportunity cost",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"
