"""Config settings – env-based configuration."""
from command_dispatch.config.settings.base import Settings
from command_dispatch.config.settings.bus import BusSettings
from command_dispatch.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["BusSettings", "EnvSettingsLoader", "Settings", "SettingsLoader"]
