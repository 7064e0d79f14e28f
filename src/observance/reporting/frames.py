"""Reporting – stack frames, extraction and vendor filtering.

Frames are ordered oldest call first, the order Sentry expects.
"""
from __future__ import annotations

import dataclasses
import traceback
from typing import Any, Iterable, Protocol, Sequence, runtime_checkable

# Directory names that mark third-party code.
DEFAULT_VENDOR_DIRS: frozenset[str] = frozenset({"site-packages", "dist-packages", "vendor"})


@dataclasses.dataclass(frozen=True)
class Frame:
    """One entry of a stack trace."""
    filename: str
    function: str
    lineno: int | None = None

    @classmethod
    def from_summary(cls, summary: traceback.FrameSummary) -> "Frame":
        return cls(filename=summary.filename, function=summary.name, lineno=summary.lineno)

    def to_sentry(self) -> dict[str, Any]:
        frame: dict[str, Any] = {
            "filename": self.filename,
            "abs_path": self.filename,
            "function": self.function,
            "in_app": True,
        }
        if self.lineno is not None:
            frame["lineno"] = self.lineno
        return frame


@runtime_checkable
class StackTracer(Protocol):
    """An error that carries its own stack trace."""

    def stack_trace(self) -> Sequence[Frame]: ...


def extract_stacktrace(err: BaseException) -> list[Frame] | None:
    """Frames carried by *err*, or ``None`` when it has none.

    ``stack_trace()`` wins over ``__traceback__``; an exception that was
    never raised has neither.
    """
    if isinstance(err, StackTracer):
        return list(err.stack_trace())
    if err.__traceback__ is not None:
        return [Frame.from_summary(s) for s in traceback.extract_tb(err.__traceback__)]
    return None


def capture_stacktrace() -> list[Frame]:
    """Frames of the current call stack, including the caller's own frames."""
    return [Frame.from_summary(s) for s in traceback.extract_stack()]


def is_vendor_path(path: str, vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS) -> bool:
    """``True`` when any directory segment of *path* is a vendor directory."""
    segments = path.replace("\\", "/").split("/")[:-1]
    dirs = frozenset(vendor_dirs)
    return any(segment in dirs for segment in segments)


def filter_vendor_frames(
    frames: Iterable[Frame],
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> list[Frame]:
    """Drop vendor frames, keeping the relative order of the rest."""
    dirs = frozenset(vendor_dirs)
    return [frame for frame in frames if not is_vendor_path(frame.filename, dirs)]


__all__ = [
    "DEFAULT_VENDOR_DIRS",
    "Frame",
    "StackTracer",
    "capture_stacktrace",
    "extract_stacktrace",
    "filter_vendor_frames",
    "is_vendor_path",
]
