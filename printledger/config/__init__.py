"""Configuration module."""

from printledger.config.logging import configure_logging, get_logger
from printledger.config.settings import (
    InventorySettings,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "InventorySettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
