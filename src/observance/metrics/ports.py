"""Metrics – Counter, Histogram, Gauge, Metrics ports."""
from __future__ import annotations

import abc


class Counter(abc.ABC):
    """Monotonically increasing counter."""

    @abc.abstractmethod
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None: ...


class Histogram(abc.ABC):
    """Distribution / latency histogram."""

    @abc.abstractmethod
    def record(self, value: float, labels: dict[str, str] | None = None) -> None: ...


class Gauge(abc.ABC):
    """Up/down gauge."""

    @abc.abstractmethod
    def set(self, value: float, labels: dict[str, str] | None = None) -> None: ...

    @abc.abstractmethod
    def inc(self, labels: dict[str, str] | None = None) -> None: ...

    @abc.abstractmethod
    def dec(self, labels: dict[str, str] | None = None) -> None: ...


class Metrics(abc.ABC):
    """Port: factory for metric instruments, plus the push lifecycle.

    One instance per process; request-scoped facades share it by reference.
    """

    @abc.abstractmethod
    def counter(self, name: str, description: str = "", unit: str = "") -> Counter: ...

    @abc.abstractmethod
    def histogram(self, name: str, description: str = "", unit: str = "ms", boundaries: list[float] | None = None) -> Histogram: ...

    @abc.abstractmethod
    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge: ...

    def flush(self, timeout: float = 5.0) -> bool:
        """Push everything recorded so far.  Never raises."""
        return True

    def close(self, timeout: float = 5.0) -> None:
        """Final flush and release of background resources."""


__all__ = ["Counter", "Gauge", "Histogram", "Metrics"]
