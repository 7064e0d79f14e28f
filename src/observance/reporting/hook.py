"""Reporting – ErrorReportHook.

Mirrors ``error``, ``fatal`` and ``panic`` records to a remote error tracker.
For each qualifying record the hook picks the error (the one attached with
``with_error``, or one built from the message), resolves its stack trace,
drops vendor frames, and queues a Sentry-shaped event on an
:class:`AsyncDispatcher`.
"""
from __future__ import annotations

import copy
from typing import Any, Iterable

from observance.logging.protocol import ERROR_KEY
from observance.logging.severity import Severity, to_remote_level
from observance.reporting.dispatcher import AsyncDispatcher
from observance.reporting.frames import (
    DEFAULT_VENDOR_DIRS,
    Frame,
    capture_stacktrace,
    extract_stacktrace,
    filter_vendor_frames,
)
from observance.reporting.transport import ErrorReportTransport

DEFAULT_LEVELS: tuple[Severity, ...] = (Severity.ERROR, Severity.FATAL, Severity.PANIC)

# Keys added by the processor chain, not by the caller.
_RECORD_KEYS = frozenset({"event", "level", "timestamp"})

_IMMUTABLE = (str, bytes, int, float, bool, type(None))


class ReportedMessage(Exception):
    """Stand-in error for a record that only carries a message."""


def _snapshot(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value) or type(value).__name__
    if isinstance(value, _IMMUTABLE):
        return value
    try:
        return copy.deepcopy(value)
    except Exception:  # noqa: BLE001
        return repr(value)


def snapshot_fields(event_dict: dict[str, Any]) -> dict[str, Any]:
    """Detached copy of the caller-supplied fields of a record."""
    return {k: _snapshot(v) for k, v in event_dict.items() if k not in _RECORD_KEYS}


class ErrorReportHook:
    """Level hook that ships qualifying records to an error tracker.

    Parameters
    ----------
    transport:
        Where events go, usually a :class:`SentryTransport`.
    levels:
        Severities the hook reacts to.
    tags:
        Static tags attached to every event.
    release / environment:
        Omitted from events when empty.
    prefix:
        Prepended to every event message.
    vendor_dirs:
        Directory names whose frames are removed from stack traces.
    queue_size:
        Depth of the delivery queue; events beyond it are dropped.
    """

    def __init__(
        self,
        transport: ErrorReportTransport,
        levels: Iterable[Severity | str] = DEFAULT_LEVELS,
        *,
        tags: dict[str, str] | None = None,
        release: str | None = None,
        environment: str | None = None,
        prefix: str = "",
        vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
        queue_size: int = 100,
    ) -> None:
        self.levels: frozenset[Severity] = frozenset(Severity.coerce(lvl) for lvl in levels)
        self._tags: dict[str, str] = dict(tags or {})
        self._release = release or None
        self._environment = environment or None
        self._prefix = prefix
        self._vendor_dirs = frozenset(vendor_dirs)
        self._dispatcher = AsyncDispatcher(transport, maxsize=queue_size)

    @property
    def dispatcher(self) -> AsyncDispatcher:
        return self._dispatcher

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_prefix(self, prefix: str) -> None:
        self._prefix = prefix

    def set_tags(self, tags: dict[str, str]) -> None:
        self._tags = dict(tags)

    def add_tag(self, key: str, value: str) -> None:
        self._tags[key] = value

    def set_release(self, release: str) -> None:
        self._release = release or None

    def set_environment(self, environment: str) -> None:
        self._environment = environment or None

    # ------------------------------------------------------------------
    # Hook interface
    # ------------------------------------------------------------------

    def fire(self, severity: Severity, event_dict: dict[str, Any]) -> None:
        if severity not in self.levels:
            return
        message = event_dict.get("event")
        message = "" if message is None else str(message)

        err = event_dict.get(ERROR_KEY)
        if not isinstance(err, BaseException):
            if not message:
                return
            # gives the event a stack trace even though only a message was logged
            err = ReportedMessage(message)

        frames = extract_stacktrace(err)
        if frames is None:
            frames = capture_stacktrace()
        frames = filter_vendor_frames(frames, self._vendor_dirs)

        self._dispatcher.submit(self.build_event(severity, message, err, frames, event_dict))

    def flush(self, timeout: float) -> bool:
        return self._dispatcher.flush(timeout)

    def close(self, timeout: float = 2.0) -> bool:
        drained = self._dispatcher.close(timeout)
        self._dispatcher.transport.close(0.0)
        return drained

    # ------------------------------------------------------------------
    # Event assembly
    # ------------------------------------------------------------------

    def build_event(
        self,
        severity: Severity,
        message: str,
        err: BaseException,
        frames: list[Frame],
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        exc_type = message if isinstance(err, ReportedMessage) else type(err).__name__
        event: dict[str, Any] = {
            "platform": "python",
            "level": to_remote_level(severity),
            "message": self._prefix + message,
            "extra": snapshot_fields(event_dict),
            "tags": dict(self._tags),
            "modules": {},
            "exception": {
                "values": [
                    {
                        "type": exc_type,
                        "value": str(err),
                        "stacktrace": {"frames": [frame.to_sentry() for frame in frames]},
                    }
                ]
            },
        }
        if self._environment:
            event["environment"] = self._environment
        if self._release:
            event["release"] = self._release
        return event


__all__ = ["DEFAULT_LEVELS", "ErrorReportHook", "ReportedMessage", "snapshot_fields"]
