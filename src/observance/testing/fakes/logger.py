"""Testing fakes – TestLogger."""
from __future__ import annotations

import dataclasses
import threading
from typing import IO, Any

from observance.logging.protocol import ERROR_KEY, Fields, Logger
from observance.logging.severity import Severity


@dataclasses.dataclass(frozen=True)
class LogEntry:
    """One record captured by :class:`TestLogger`."""
    level: str
    message: str
    fields: dict[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def error(self) -> BaseException | None:
        err = self.fields.get(ERROR_KEY)
        return err if isinstance(err, BaseException) else None


class _EntryLog:
    def __init__(self) -> None:
        self.entries: list[LogEntry] = []
        self.lock = threading.Lock()
        self.output: IO[str] | None = None


class TestLogger(Logger):
    """In-memory :class:`Logger` double.

    Every logger derived from one ``TestLogger`` appends to the same entry
    log, so assertions can be made on the root::

        logger = TestLogger()
        obs = Obs(logger=logger)
        obs.logger.with_field("x", 1).error("boom")
        assert logger.last_entry() == LogEntry("error", "boom", {"x": 1})
    """

    __test__ = False

    def __init__(
        self,
        level: Severity | str = Severity.TRACE,
        *,
        _log: _EntryLog | None = None,
        _fields: dict[str, Any] | None = None,
    ) -> None:
        self._threshold = Severity.coerce(level)
        self._log = _log if _log is not None else _EntryLog()
        self._fields: dict[str, Any] = _fields or {}

    @property
    def level(self) -> str:
        return self._threshold.label

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    def log(self, level: Severity | str, message: Any) -> None:
        severity = Severity.coerce(level)
        if severity < self._threshold:
            return
        entry = LogEntry(severity.label, str(message), dict(self._fields))
        with self._log.lock:
            self._log.entries.append(entry)

    def _derive(self, fields: Fields) -> "TestLogger":
        return TestLogger(self._threshold, _log=self._log, _fields={**self._fields, **fields})

    def with_field(self, key: str, value: Any) -> "TestLogger":
        return self._derive({key: value})

    def with_fields(self, fields: Fields) -> "TestLogger":
        return self._derive(fields)

    def with_error(self, err: BaseException) -> "TestLogger":
        return self._derive({ERROR_KEY: err})

    def set_output(self, stream: IO[str]) -> None:
        self._log.output = stream

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------

    def entries(self) -> list[LogEntry]:
        with self._log.lock:
            return list(self._log.entries)

    def last_entry(self) -> LogEntry | None:
        with self._log.lock:
            return self._log.entries[-1] if self._log.entries else None

    def reset(self) -> None:
        with self._log.lock:
            self._log.entries.clear()


__all__ = ["LogEntry", "TestLogger"]
