"""Observability – LogSink, the serialised output destination shared by a logger tree."""
from __future__ import annotations

import sys
import threading
from typing import IO

from observance.errors import SinkWriteError


class LogSink:
    """Writes one rendered record per line to a text stream.

    Writes are serialised by a lock so concurrent callers never interleave
    partial lines.  The object also serves as the wrapped logger of the
    structlog bound logger, hence one method per severity label.

    Parameters
    ----------
    stream:
        Destination; defaults to ``sys.stdout`` resolved at write time.
    raise_on_write_error:
        When ``True`` a failing write raises :class:`SinkWriteError`;
        otherwise the failure is reported on ``sys.stderr`` and dropped.
    """

    def __init__(self, stream: IO[str] | None = None, raise_on_write_error: bool = False) -> None:
        self._stream = stream
        self._raise = raise_on_write_error
        self._lock = threading.Lock()

    @property
    def stream(self) -> IO[str]:
        return self._stream if self._stream is not None else sys.stdout

    def set_output(self, stream: IO[str]) -> None:
        with self._lock:
            self._stream = stream

    def msg(self, message: str) -> None:
        with self._lock:
            stream = self.stream
            try:
                stream.write(message + "\n")
                stream.flush()
            except (OSError, ValueError) as exc:
                if self._raise:
                    raise SinkWriteError("Failed to write to log", cause=exc) from exc
                print(f"Failed to write to log, {exc!r}", file=sys.stderr)

    trace = debug = info = warning = error = fatal = panic = msg


__all__ = ["LogSink"]
