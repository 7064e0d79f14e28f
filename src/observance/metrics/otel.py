"""Metrics – OtelMetrics, an OpenTelemetry reporter pushing on a fixed interval.

The reporter owns its own ``MeterProvider`` (the global provider is left
untouched).  A ``PeriodicExportingMetricReader`` exports every
*flush_interval* seconds on its own thread, so recording never blocks a
request path.
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from observance.metrics.ports import Counter, Gauge, Histogram, Metrics

if TYPE_CHECKING:
    from observance.logging.protocol import Logger


def _label_key(labels: dict[str, str] | None) -> tuple[tuple[str, str], ...]:
    return tuple(sorted((labels or {}).items()))


class _OtelCounter(Counter):
    def __init__(self, counter: Any) -> None:
        self._c = counter

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        self._c.add(value, attributes=labels)


class _OtelHistogram(Histogram):
    def __init__(self, hist: Any) -> None:
        self._h = hist

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        self._h.record(value, attributes=labels)


class _OtelGauge(Gauge):
    """Gauge on top of an up/down counter; tracks the current value per label set."""

    def __init__(self, up_down: Any) -> None:
        self._u = up_down
        self._values: dict[tuple[tuple[str, str], ...], float] = {}
        self._lock = threading.Lock()

    def value(self, labels: dict[str, str] | None = None) -> float:
        with self._lock:
            return self._values.get(_label_key(labels), 0.0)

    def _move(self, labels: dict[str, str] | None, new: float | None = None, delta: float = 0.0) -> None:
        key = _label_key(labels)
        with self._lock:
            current = self._values.get(key, 0.0)
            target = current + delta if new is None else new
            self._values[key] = target
        self._u.add(target - current, attributes=labels)

    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        self._move(labels, new=value)

    def inc(self, labels: dict[str, str] | None = None) -> None:
        self._move(labels, delta=1.0)

    def dec(self, labels: dict[str, str] | None = None) -> None:
        self._move(labels, delta=-1.0)


class OtelMetrics(Metrics):
    """OpenTelemetry metrics reporter.

    Parameters
    ----------
    service_name:
        Reported as the ``service.name`` resource attribute.
    endpoint:
        OTLP/HTTP metrics endpoint, e.g. ``http://collector:4318/v1/metrics``.
    flush_interval:
        Seconds between two pushes.
    reader:
        Metric reader to use instead of the OTLP push reader (tests pass an
        ``InMemoryMetricReader``).
    logger:
        Receives a ``warn`` record when a flush fails.
    """

    def __init__(
        self,
        service_name: str,
        *,
        endpoint: str | None = None,
        flush_interval: float = 10.0,
        reader: Any = None,
        logger: "Logger | None" = None,
    ) -> None:
        if reader is None:
            reader = PeriodicExportingMetricReader(
                OTLPMetricExporter(endpoint=endpoint),
                export_interval_millis=flush_interval * 1000,
            )
        self._reader = reader
        self._logger = logger
        self._provider = MeterProvider(
            resource=Resource.create({"service.name": service_name}),
            metric_readers=[reader],
        )
        self._meter = self._provider.get_meter("observance")
        self._instruments: dict[tuple[str, str], Any] = {}
        self._lock = threading.Lock()
        self._closed = False

    def _instrument(self, kind: str, name: str, factory: Any) -> Any:
        with self._lock:
            key = (kind, name)
            if key not in self._instruments:
                self._instruments[key] = factory()
            return self._instruments[key]

    def counter(self, name: str, description: str = "", unit: str = "") -> Counter:
        return self._instrument(
            "counter",
            name,
            lambda: _OtelCounter(self._meter.create_counter(name, unit=unit, description=description)),
        )

    def histogram(self, name: str, description: str = "", unit: str = "ms", boundaries: list[float] | None = None) -> Histogram:
        def build() -> _OtelHistogram:
            kwargs: dict[str, Any] = {"unit": unit, "description": description}
            if boundaries:
                kwargs["explicit_bucket_boundaries_advisory"] = boundaries
            return _OtelHistogram(self._meter.create_histogram(name, **kwargs))

        return self._instrument("histogram", name, build)

    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge:
        return self._instrument(
            "gauge",
            name,
            lambda: _OtelGauge(self._meter.create_up_down_counter(name, unit=unit, description=description)),
        )

    def flush(self, timeout: float = 5.0) -> bool:
        if self._closed:
            return True
        try:
            ok = bool(self._provider.force_flush(timeout_millis=timeout * 1000))
        except Exception as exc:  # noqa: BLE001
            self._warn(f"metrics flush failed: {exc}")
            return False
        if not ok:
            self._warn("metrics flush timed out")
        return ok

    def close(self, timeout: float = 5.0) -> None:
        if self._closed:
            return
        self.flush(timeout)
        self._closed = True
        try:
            self._provider.shutdown(timeout_millis=timeout * 1000)
        except Exception as exc:  # noqa: BLE001
            self._warn(f"metrics shutdown failed: {exc}")

    def _warn(self, message: str) -> None:
        if self._logger is not None:
            self._logger.warn(message)


__all__ = ["OtelMetrics"]
