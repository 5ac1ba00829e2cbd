"""Configuration management for BIMCall."""

from .settings import (
    BIMCallSettings,
    ImportSettings,
    LoggingSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "BIMCallSettings",
    "ImportSettings",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
]
