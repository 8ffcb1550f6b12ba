"""Configuration management with Pydantic and XDG base directory support."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Location of the signing keys relative to the user's config root.
KEY_SUBDIR = Path("ferrispad") / "signing"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_xdg_config_home() -> Path:
    """Get XDG_CONFIG_HOME directory, defaulting to ~/.config."""
    xdg_config = os.getenv("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


class Settings(BaseSettings):
    """plugin-signer settings.

    Precedence: CLI flag > environment variable > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_SIGNER_",
        case_sensitive=False,
        extra="ignore",
    )

    key_dir: Path | None = Field(
        default=None,
        description="Override key directory (defaults to XDG_CONFIG_HOME/ferrispad/signing)",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Logging level for diagnostics written to stderr",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def get_key_dir(self) -> Path:
        """Return the effective key directory. Does not create it."""
        if self.key_dir is not None:
            return self.key_dir
        return get_xdg_config_home() / KEY_SUBDIR


_settings: Settings | None = None
_handler: logging.Handler | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings | None) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings


def configure_logging(level: str | int) -> None:
    """Route package log records to the current stderr at *level*."""
    global _handler
    package_logger = logging.getLogger("plugin_signer")
    package_logger.setLevel(level)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(_handler)


__all__ = [
    "KEY_SUBDIR",
    "LogLevel",
    "Settings",
    "configure_logging",
    "get_settings",
    "get_xdg_config_home",
    "set_settings",
]
