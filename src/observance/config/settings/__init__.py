"""Config settings – 12-factor env-based configuration."""
from observance.config.settings.base import Settings
from observance.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
