"""Config validation errors."""
from command_dispatch.config.validation.errors import (
    ConfigError,
    HandlerConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "HandlerConfigurationError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
