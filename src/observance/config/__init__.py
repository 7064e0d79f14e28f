"""Config – settings, loaders, validation and the observability config."""
from observance.config.obs import DEFAULT_HEADER_FIELDS, ObsConfig
from observance.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from observance.config.validation import (
    ConfigError,
    InvalidConfigError,
    InvalidLevelError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DEFAULT_HEADER_FIELDS",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidConfigError",
    "InvalidLevelError",
    "MissingRequiredSettingError",
    "ObsConfig",
    "Settings",
    "SettingsLoader",
]
