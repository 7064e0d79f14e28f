"""Reporting – AsyncDispatcher.

A fire-and-forget queue in front of an :class:`ErrorReportTransport`.
Events are enqueued without blocking the logging caller; a daemon worker
thread drains the queue and hands each event to the transport.
"""
from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any

from observance.reporting.transport import ErrorReportTransport

logger = logging.getLogger(__name__)

_STOP = object()


class AsyncDispatcher:
    """Non-blocking event queue drained by a background thread.

    Delivery is at-most-once: a full queue drops the event, a failing
    transport drops the event, and events still queued when a bounded
    :meth:`flush` times out are lost on shutdown.

    Parameters
    ----------
    transport:
        Destination of every event.
    maxsize:
        Maximum queue depth.  ``0`` means unlimited.
    """

    def __init__(self, transport: ErrorReportTransport, maxsize: int = 100) -> None:
        self._transport = transport
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=maxsize)
        self._pending = 0
        self._idle = threading.Condition()
        self._start_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._closed = False
        self.dropped = 0

    @property
    def transport(self) -> ErrorReportTransport:
        return self._transport

    @property
    def pending(self) -> int:
        with self._idle:
            return self._pending

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def submit(self, event: dict[str, Any]) -> bool:
        """Enqueue *event*; ``False`` when it was dropped."""
        if self._closed:
            self._drop("closed")
            return False
        self._ensure_worker()
        with self._idle:
            self._pending += 1
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self._done()
            self._drop("queue_full")
            return False
        return True

    def flush(self, timeout: float) -> bool:
        """Wait up to *timeout* seconds for the queue to drain.

        Returns ``True`` when every submitted event reached the transport and
        the transport itself flushed in time.  A zero timeout only checks.
        """
        deadline = time.monotonic() + max(timeout, 0.0)
        with self._idle:
            while self._pending:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._idle.wait(remaining)
        remaining = max(deadline - time.monotonic(), 0.0)
        try:
            return self._transport.flush(remaining)
        except Exception as exc:  # noqa: BLE001
            logger.debug("observance.transport_flush_failed exc=%r", exc)
            return False

    def close(self, timeout: float = 2.0) -> bool:
        """Flush, then stop the worker.  Later calls are no-ops."""
        if self._closed:
            return True
        drained = self.flush(timeout)
        self._closed = True
        if self._thread is not None:
            try:
                self._queue.put_nowait(_STOP)
            except queue.Full:
                pass
        return drained

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _ensure_worker(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        with self._start_lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(
                target=self._drain, name="observance.dispatcher", daemon=True
            )
            self._thread.start()

    def _drain(self) -> None:
        while True:
            event = self._queue.get()
            if event is _STOP:
                break
            try:
                self._transport.send(event)
            except Exception as exc:  # noqa: BLE001
                self._drop("delivery_failed", exc)
            finally:
                self._done()

    def _done(self) -> None:
        with self._idle:
            self._pending -= 1
            if not self._pending:
                self._idle.notify_all()

    def _drop(self, reason: str, exc: BaseException | None = None) -> None:
        with self._idle:
            self.dropped += 1
        logger.debug("observance.event_dropped reason=%s exc=%r", reason, exc)


__all__ = ["AsyncDispatcher"]
