"""Config validation errors."""
from __future__ import annotations

from observance.errors import ObservanceError


class ConfigError(ObservanceError):
    """Raised when configuration is invalid or loading failed."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A required environment variable / setting is absent."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing")
        self.setting_name = setting_name


class InvalidConfigError(ConfigError):
    """A setting's value is present but semantically invalid."""
    default_code = "invalid_config"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


class InvalidLevelError(ConfigError, ValueError):
    """A log level name could not be parsed."""
    default_code = "invalid_level"

    def __init__(self, level: object) -> None:
        super().__init__(f"not a valid log level: {level!r}", detail={"level": str(level)})
        self.level = level


__all__ = ["ConfigError", "InvalidConfigError", "InvalidLevelError", "MissingRequiredSettingError"]
