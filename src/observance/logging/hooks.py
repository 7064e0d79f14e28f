"""Observability – level hooks.

A hook is notified of every record at one of its ``levels`` that passed the
logger threshold.  :class:`LevelHooks` keeps the registry and runs as a
structlog processor so hooks see the record before it is rendered.
"""
from __future__ import annotations

import sys
import threading
import time
from collections import defaultdict
from typing import Any, Iterable, Protocol, runtime_checkable

from observance.logging.severity import Severity


@runtime_checkable
class Hook(Protocol):
    """Port: receives qualifying records."""

    @property
    def levels(self) -> Iterable[Severity]: ...

    def fire(self, severity: Severity, event_dict: dict[str, Any]) -> None: ...

    def flush(self, timeout: float) -> bool: ...


class LevelHooks:
    """Registry of hooks keyed by severity."""

    def __init__(self) -> None:
        self._hooks: dict[Severity, list[Hook]] = defaultdict(list)
        self._lock = threading.Lock()

    def add(self, hook: Hook) -> None:
        with self._lock:
            for severity in hook.levels:
                self._hooks[Severity.coerce(severity)].append(hook)

    def for_level(self, severity: Severity) -> list[Hook]:
        with self._lock:
            return list(self._hooks.get(severity, ()))

    def all(self) -> list[Hook]:
        with self._lock:
            unique: dict[int, Hook] = {}
            for hooks in self._hooks.values():
                for hook in hooks:
                    unique.setdefault(id(hook), hook)
            return list(unique.values())

    def fire(self, severity: Severity, event_dict: dict[str, Any]) -> None:
        for hook in self.for_level(severity):
            try:
                hook.fire(severity, event_dict)
            except Exception as exc:  # noqa: BLE001
                print(f"Failed to fire hook: {exc!r}", file=sys.stderr)

    def flush(self, timeout: float) -> bool:
        """Flush every hook within a shared *timeout* (seconds)."""
        deadline = time.monotonic() + max(timeout, 0.0)
        drained = True
        for hook in self.all():
            remaining = max(deadline - time.monotonic(), 0.0)
            drained = hook.flush(remaining) and drained
        return drained

    def close(self, timeout: float) -> bool:
        """Close every hook within a shared *timeout*; hooks without ``close`` are flushed."""
        deadline = time.monotonic() + max(timeout, 0.0)
        drained = True
        for hook in self.all():
            remaining = max(deadline - time.monotonic(), 0.0)
            close = getattr(hook, "close", None)
            result = close(remaining) if close is not None else hook.flush(remaining)
            drained = result is not False and drained
        return drained

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        self.fire(Severity.parse(method_name), event_dict)
        return event_dict

    def __len__(self) -> int:
        return len(self.all())


__all__ = ["Hook", "LevelHooks"]
