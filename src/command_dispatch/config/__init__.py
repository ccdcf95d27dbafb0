"""Config – 12-factor settings for the command bus."""

from command_dispatch.config.settings import BusSettings, EnvSettingsLoader, Settings, SettingsLoader
from command_dispatch.config.validation import (
    ConfigError,
    HandlerConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "BusSettings",
    "ConfigError",
    "EnvSettingsLoader",
    "HandlerConfigurationError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
