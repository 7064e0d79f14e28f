"""Root error hierarchy for observance.

Hierarchy::

    ObservanceError
    ├── ConfigError                      (config/validation/errors.py)
    │   ├── InvalidConfigError
    │   ├── MissingRequiredSettingError
    │   └── InvalidLevelError
    ├── DeliveryError
    └── SinkWriteError
"""

from __future__ import annotations

import json
from typing import Any


class ObservanceError(Exception):
    """Root of the error hierarchy.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Arbitrary extra context (serialisable dict).
        cause: Original exception that triggered this error.
    """

    default_code: str = "observance_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (safe for logging / HTTP responses)."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


class DeliveryError(ObservanceError):
    """A remote transport failed to accept an event."""

    default_code = "delivery_failure"


class SinkWriteError(ObservanceError):
    """The log output destination could not be written."""

    default_code = "sink_write_failure"


__all__ = ["DeliveryError", "ObservanceError", "SinkWriteError"]
