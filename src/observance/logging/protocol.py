"""Observability – Logger port."""
from __future__ import annotations

import abc
from typing import IO, Any, Mapping

from observance.logging.severity import Severity

Fields = Mapping[str, Any]

# Key under which with_error() stores the exception.
ERROR_KEY = "error"


class Logger(abc.ABC):
    """Leveled, field-annotated logger.

    Derivation (``with_field``, ``with_fields``, ``with_error``) returns a new
    logger and never changes the receiver.  ``set_output`` is the only
    mutation and affects every logger derived from the same root.
    """

    @property
    @abc.abstractmethod
    def level(self) -> str:
        """Label of the minimum severity that is written."""

    @abc.abstractmethod
    def log(self, level: Severity | str, message: Any) -> None: ...

    @abc.abstractmethod
    def with_field(self, key: str, value: Any) -> "Logger": ...

    @abc.abstractmethod
    def with_fields(self, fields: Fields) -> "Logger": ...

    @abc.abstractmethod
    def with_error(self, err: BaseException) -> "Logger": ...

    @abc.abstractmethod
    def set_output(self, stream: IO[str]) -> None: ...

    def trace(self, message: Any) -> None:
        self.log(Severity.TRACE, message)

    def debug(self, message: Any) -> None:
        self.log(Severity.DEBUG, message)

    def info(self, message: Any) -> None:
        self.log(Severity.INFO, message)

    def warn(self, message: Any) -> None:
        self.log(Severity.WARN, message)

    # common alias
    warning = warn

    def error(self, message: Any) -> None:
        self.log(Severity.ERROR, message)


__all__ = ["ERROR_KEY", "Fields", "Logger"]
