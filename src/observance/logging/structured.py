"""Observability – StructLogger, the structlog-backed :class:`Logger`.

Every logger derived from one root shares a :class:`_LoggerCore` (threshold,
sink, hooks) by reference; only the bound field set differs.  Derivation
goes through structlog's ``bind`` which copies the context, so a parent
logger's fields are never touched.

Records are rendered by a per-root processor chain rather than the global
``structlog.configure`` so a host application's own structlog setup is left
alone::

    add_log_level -> TimeStamper -> LevelHooks -> error rendering
        -> EventRenamer("message") -> JSONRenderer
"""
from __future__ import annotations

import dataclasses
import os
import socket
from typing import IO, Any, Iterable

import structlog

from observance.logging.hooks import Hook, LevelHooks
from observance.logging.protocol import ERROR_KEY, Fields, Logger
from observance.logging.severity import Severity
from observance.logging.sink import LogSink


class _SeverityBoundLogger(structlog.BoundLoggerBase):
    """Bound logger that proxies to the sink method named after the severity."""

    def emit(self, severity: Severity, message: str) -> Any:
        return self._proxy_to_logger(severity.label, message)


@dataclasses.dataclass(frozen=True)
class _LoggerCore:
    threshold: Severity
    sink: LogSink
    hooks: LevelHooks


def _render_error(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
    err = event_dict.get(ERROR_KEY)
    if isinstance(err, BaseException):
        event_dict[ERROR_KEY] = str(err) or type(err).__name__
    return event_dict


def process_identity(app_name: str) -> dict[str, Any]:
    """Fields attached once to a root logger: app name, pid and hostname."""
    try:
        hostname = socket.gethostname() or "unknown"
    except OSError:
        hostname = "unknown"
    return {"name": app_name, "pid": os.getpid(), "hostname": hostname}


class StructLogger(Logger):
    """Production :class:`Logger` writing one JSON object per line.

    Build the root with :func:`new_logger`; derive with ``with_*``.
    """

    def __init__(self, core: _LoggerCore, bound: _SeverityBoundLogger) -> None:
        self._core = core
        self._bound = bound

    @property
    def level(self) -> str:
        return self._core.threshold.label

    @property
    def threshold(self) -> Severity:
        return self._core.threshold

    @property
    def fields(self) -> dict[str, Any]:
        """Copy of the fields bound on this logger."""
        return dict(self._bound._context)

    @property
    def hooks(self) -> LevelHooks:
        return self._core.hooks

    def is_enabled(self, level: Severity | str) -> bool:
        return Severity.coerce(level) >= self._core.threshold

    def log(self, level: Severity | str, message: Any) -> None:
        severity = Severity.coerce(level)
        if severity < self._core.threshold:
            return
        self._bound.emit(severity, message if isinstance(message, str) else str(message))

    def with_field(self, key: str, value: Any) -> "StructLogger":
        return StructLogger(self._core, self._bound.bind(**{str(key): value}))

    def with_fields(self, fields: Fields) -> "StructLogger":
        return StructLogger(self._core, self._bound.bind(**{str(k): v for k, v in fields.items()}))

    def with_error(self, err: BaseException) -> "StructLogger":
        return StructLogger(self._core, self._bound.bind(**{ERROR_KEY: err}))

    def set_output(self, stream: IO[str]) -> None:
        self._core.sink.set_output(stream)

    def add_hook(self, hook: Hook) -> None:
        """Register *hook* on the core shared by the whole logger tree."""
        self._core.hooks.add(hook)

    def flush(self, timeout: float) -> bool:
        """Flush all hooks; ``True`` when everything was delivered in time."""
        return self._core.hooks.flush(timeout)

    def close(self, timeout: float) -> bool:
        """Flush and release every hook, stopping their delivery threads."""
        return self._core.hooks.close(timeout)

    def __repr__(self) -> str:
        return f"StructLogger(level={self.level!r}, fields={sorted(self._bound._context)!r})"


def new_logger(
    level: Severity | str = Severity.INFO,
    app_name: str = "",
    *,
    stream: IO[str] | None = None,
    hooks: Iterable[Hook] = (),
    raise_on_write_error: bool = False,
) -> StructLogger:
    """Create a root :class:`StructLogger`.

    All records carry ``name``, ``pid`` and ``hostname``.

    Raises
    ------
    InvalidLevelError
        When *level* is not a valid level name.
    """
    threshold = Severity.coerce(level)
    level_hooks = LevelHooks()
    for hook in hooks:
        level_hooks.add(hook)

    core = _LoggerCore(
        threshold=threshold,
        sink=LogSink(stream, raise_on_write_error=raise_on_write_error),
        hooks=level_hooks,
    )
    processors: list[Any] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        level_hooks,
        _render_error,
        structlog.processors.EventRenamer("message"),
        structlog.processors.JSONRenderer(sort_keys=True),
    ]
    bound = _SeverityBoundLogger(core.sink, processors, process_identity(app_name))
    return StructLogger(core, bound)


__all__ = ["StructLogger", "new_logger", "process_identity"]
