# pageobject/utils/config.py
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# LocateStrategy values usable as a default (no "recursion"); listed here so
# config does not import the core package
DEFAULT_STRATEGY_CHOICES = (
    "css selector",
    "xpath",
    "link text",
    "partial link text",
    "tag name",
)


class Settings(BaseSettings):
    """
    Page-object runtime settings.

    Read from PAGEOBJECT_* environment variables, then a local `.env`, then
    the defaults declared here.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEOBJECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # element lookup
    DEFAULT_LOCATE_STRATEGY: str = Field(
        default="css selector",
        description="Used by the Playwright bridge for elements declared without a strategy",
    )
    ELEMENT_TIMEOUT_MS: int = Field(default=5000, ge=0)
    ASYNC_TESTCASE: bool = Field(
        default=False,
        description="Clients created without an explicit mode run as async test cases",
    )
    PAGE_OBJECTS_DIR: Path = Field(default=Path("./page_objects"))

    # logging
    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_TO_FILE: bool = False
    LOG_FILE: Path = Path("./pageobject.log")
    COLORIZED_OUTPUT: bool = True

    @field_validator("DEFAULT_LOCATE_STRATEGY")
    @classmethod
    def _known_strategy(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in DEFAULT_STRATEGY_CHOICES:
            raise ValueError(
                f"unsupported default locate strategy {v!r}; expected one of {', '.join(DEFAULT_STRATEGY_CHOICES)}"
            )
        return normalized

    @field_validator("PAGE_OBJECTS_DIR", "LOG_FILE", mode="after")
    @classmethod
    def _resolve_relative(cls, v: Path) -> Path:
        return v if v.is_absolute() else Path.cwd() / v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings; `get_settings.cache_clear()` forces a re-read."""
    return Settings()
