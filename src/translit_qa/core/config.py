"""
translit-qa Configuration Module

Handles all configuration settings using pydantic-settings.
Every field can be overridden with a TRANSLIT_QA_* environment variable
or a .env file in the working directory.
"""

from enum import Enum
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from translit_qa.core.exceptions import ConfigurationError
from translit_qa.core.matching import ScriptRange


class SettleMode(str, Enum):
    """How the invoker waits for the service to finish converting."""

    FIXED = "fixed"
    POLL = "poll"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSLIT_QA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Target service
    target_url: str = Field(default="https://www.swifttranslator.com/")

    # Browser
    headless: bool = Field(default=True)
    viewport_width: int = Field(default=1280)
    viewport_height: int = Field(default=720)
    navigation_timeout_ms: int = Field(default=30000)

    # Conversion settle
    settle_mode: SettleMode = Field(default=SettleMode.POLL)
    settle_delay_ms: int = Field(default=2000)
    poll_interval_ms: int = Field(default=250)
    poll_timeout_ms: int = Field(default=5000)

    # Element resolution
    content_scan_limit: int = Field(default=50)
    target_script_start: int = Field(default=0x0D80)
    target_script_end: int = Field(default=0x0DFF)

    # Runner
    screenshot_dir: str = Field(default="test-results")
    strict_exploratory: bool = Field(default=False)
    max_workers: int = Field(default=1)

    # Application Settings
    log_level: str = Field(default="INFO")

    @field_validator("target_url")
    @classmethod
    def _check_target_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("target_url must start with http:// or https://")
        return value

    @field_validator("max_workers", "content_scan_limit")
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @property
    def target_host(self) -> str:
        """Host part of the target URL, used to detect whether we are on the service."""
        return urlparse(self.target_url).netloc

    @property
    def target_script(self) -> ScriptRange:
        """Unicode block the service is expected to emit."""
        if self.target_script_start > self.target_script_end:
            raise ConfigurationError(
                "target_script_start must not exceed target_script_end",
                details={"start": self.target_script_start, "end": self.target_script_end},
            )
        return ScriptRange("target", self.target_script_start, self.target_script_end)


# Global settings instance
settings = Settings()
