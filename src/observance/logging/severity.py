"""Observability – severity model and mapping to the remote error-tracking taxonomy."""
from __future__ import annotations

import enum

from observance.config.validation import InvalidLevelError


class Severity(enum.IntEnum):
    """Log levels, totally ordered by increasing criticality."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    FATAL = 50
    PANIC = 60

    @property
    def label(self) -> str:
        """Name written to the sink (``warn`` renders as ``warning``)."""
        if self is Severity.WARN:
            return "warning"
        return self.name.lower()

    @classmethod
    def parse(cls, name: str) -> "Severity":
        """Parse a level name, case-insensitively.

        Raises
        ------
        InvalidLevelError
            When *name* is not one of the known level names.
        """
        if not isinstance(name, str):
            raise InvalidLevelError(name)
        key = name.strip().lower()
        try:
            return _BY_NAME[key]
        except KeyError:
            raise InvalidLevelError(name) from None

    @classmethod
    def coerce(cls, value: "Severity | str") -> "Severity":
        if isinstance(value, Severity):
            return value
        return cls.parse(value)


_BY_NAME: dict[str, Severity] = {s.name.lower(): s for s in Severity}
_BY_NAME["warning"] = Severity.WARN

# Sentry levels
REMOTE_LEVELS: dict[Severity, str] = {
    Severity.PANIC: "fatal",
    Severity.FATAL: "fatal",
    Severity.ERROR: "error",
    Severity.WARN: "warning",
    Severity.INFO: "info",
    Severity.DEBUG: "debug",
    Severity.TRACE: "debug",
}


def compare(a: Severity | str, b: Severity | str) -> int:
    """Return -1, 0 or 1 as *a* is less critical than, equal to, or more critical than *b*."""
    left, right = Severity.coerce(a), Severity.coerce(b)
    return (left > right) - (left < right)


def to_remote_level(severity: Severity, table: dict[Severity, str] | None = None) -> str:
    """Map *severity* onto the remote taxonomy.

    A severity missing from *table* resolves to the closest lower severity
    that has an entry, and to ``"debug"`` when none does.
    """
    table = REMOTE_LEVELS if table is None else table
    for candidate in sorted(Severity, reverse=True):
        if candidate <= severity and candidate in table:
            return table[candidate]
    return "debug"


__all__ = ["REMOTE_LEVELS", "Severity", "compare", "to_remote_level"]
