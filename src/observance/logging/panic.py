"""Observability – panic guard.

Stops an unhandled exception at a unit-of-work boundary and turns it into a
single ``error`` record carrying the stack trace::

    with PanicRecover(logger):
        handle(job)

    async with PanicRecover(logger):
        await handle(request)

Only :class:`Exception` subclasses are recovered.  ``KeyboardInterrupt``,
``SystemExit`` and task cancellation keep propagating so shutdown is never
held up by the guard.
"""
from __future__ import annotations

import traceback
from types import TracebackType
from typing import Any, Callable, TypeVar

from observance.logging.protocol import Logger

T = TypeVar("T")

PanicCallback = Callable[[BaseException, str], None]


def format_stack(exc: BaseException) -> str:
    """Formatted traceback of the path that raised *exc*."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def panic_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def log_panic(logger: Logger, exc: BaseException, stack: str | None = None) -> None:
    """Write *exc* as one ``error`` record with a ``stack`` field."""
    stack = format_stack(exc) if stack is None else stack
    logger.with_field("stack", stack).with_error(exc).error(panic_message(exc))


class PanicRecover:
    """Sync/async context manager that logs and suppresses an escaping exception."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger
        self.recovered: BaseException | None = None

    def __enter__(self) -> "PanicRecover":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None or not isinstance(exc, Exception):
            return False
        self.recovered = exc
        log_panic(self._logger, exc)
        return True

    async def __aenter__(self) -> "PanicRecover":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        return self.__exit__(exc_type, exc, tb)


def panic_recover(logger: Logger) -> PanicRecover:
    """Function form of :class:`PanicRecover`."""
    return PanicRecover(logger)


def run_guarded(
    fn: Callable[..., T],
    *args: Any,
    on_panic: PanicCallback,
    **kwargs: Any,
) -> T | None:
    """Run *fn*; on failure hand ``(exc, stack)`` to *on_panic* and return ``None``."""
    try:
        return fn(*args, **kwargs)
    except Exception as exc:
        on_panic(exc, format_stack(exc))
        return None


__all__ = ["PanicCallback", "PanicRecover", "format_stack", "log_panic", "panic_message", "panic_recover", "run_guarded"]
