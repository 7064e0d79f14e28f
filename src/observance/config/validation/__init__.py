"""Config validation errors."""
from observance.config.validation.errors import (
    ConfigError,
    InvalidConfigError,
    InvalidLevelError,
    MissingRequiredSettingError,
)

__all__ = ["ConfigError", "InvalidConfigError", "InvalidLevelError", "MissingRequiredSettingError"]
