"""
PDF Generator Configuration Module

Centralized configuration management with Pydantic validation.
Every timeout and settle delay of the render workflow lives here so
deployments can tune them without code changes. Values are validated at
startup to fail fast on misconfiguration.
"""

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

WAIT_UNTIL_OPTIONS = ("networkidle", "domcontentloaded", "load")


class GeneratorSettings(BaseSettings):
    """
    PDF generator configuration with validation.

    All settings can be overridden via environment variables or a .env file.
    """

    # === Server ===
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, ge=1, le=65535, description="Listening port")
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # === Logging ===
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    log_format: str = Field(default="simple", description="'simple' or 'json'")

    # === Browser session ===
    browser_launch_timeout_ms: int = Field(default=60000, ge=1000, le=300000)
    page_default_timeout_ms: int = Field(
        default=60000,
        ge=1000,
        le=300000,
        description="Default timeout for page operations (60-120s in production)"
    )
    viewport_width: int = Field(default=1200, ge=320, le=3840)
    viewport_height: int = Field(default=800, ge=240, le=2160)
    block_heavy_resources: bool = Field(
        default=False,
        description="Abort font/media/streaming sub-requests during load"
    )

    # === Navigation ===
    navigation_timeout_ms: int = Field(default=45000, ge=1000, le=300000)
    navigation_wait_until: str = Field(
        default="networkidle",
        description="Load condition: networkidle, domcontentloaded or load"
    )
    navigation_max_attempts: int = Field(default=3, ge=1, le=10)
    navigation_retry_delay_seconds: float = Field(default=2.0, ge=0, le=60)

    # === Settle delays ===
    content_settle_seconds: float = Field(default=3.0, ge=0, le=60)
    map_wait_timeout_ms: int = Field(default=10000, ge=0, le=120000)
    map_settle_seconds: float = Field(default=5.0, ge=0, le=60)
    layout_settle_seconds: float = Field(default=2.0, ge=0, le=60)

    # === Export ===
    pdf_export_timeout_seconds: float = Field(default=30.0, gt=0, le=300)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known logging level name."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(allowed))}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ("simple", "json"):
            raise ValueError("log_format must be 'simple' or 'json'")
        return v_lower

    @field_validator("navigation_wait_until")
    @classmethod
    def validate_wait_until(cls, v: str) -> str:
        """Validate the Playwright load condition used by page.goto."""
        v_lower = v.lower()
        if v_lower not in WAIT_UNTIL_OPTIONS:
            raise ValueError(
                f"navigation_wait_until must be one of: {', '.join(WAIT_UNTIL_OPTIONS)}"
            )
        return v_lower

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_prefix = ""  # No prefix, use exact env var names
        env_file = ".env"
        case_sensitive = False  # PORT = port
        extra = "ignore"


@lru_cache()
def get_settings() -> GeneratorSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached. Used as a FastAPI dependency so
    tests can override it.
    """
    return GeneratorSettings()


def validate_config_on_startup() -> GeneratorSettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    """
    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    logger.info(f"Configuration loaded: {settings.host}:{settings.port}")
    logger.info(
        f"  navigation: wait_until={settings.navigation_wait_until} "
        f"timeout={settings.navigation_timeout_ms}ms "
        f"attempts={settings.navigation_max_attempts}"
    )
    logger.info(f"  page_default_timeout={settings.page_default_timeout_ms}ms")
    logger.info(f"  pdf_export_timeout={settings.pdf_export_timeout_seconds}s")
    logger.info(f"  block_heavy_resources={settings.block_heavy_resources}")
    return settings
