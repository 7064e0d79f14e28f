"""Unit tests for metrics – ports and the OpenTelemetry reporter."""
from __future__ import annotations

from typing import Any, Iterator

import pytest
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from observance.metrics import Counter, Gauge, Histogram, Metrics, OtelMetrics
from observance.testing import FakeMetricsRegistry, TestLogger


def _points(reader: InMemoryMetricReader, name: str) -> list[Any]:
    data = reader.get_metrics_data()
    points: list[Any] = []
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if metric.name == name:
                    points.extend(metric.data.data_points)
    return points


# ---------------------------------------------------------------------------
# OtelMetrics
# ---------------------------------------------------------------------------


@pytest.fixture()
def reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture()
def metrics(reader: InMemoryMetricReader) -> Iterator[OtelMetrics]:
    m = OtelMetrics("billing", reader=reader)
    yield m
    m.close(1.0)


class TestOtelMetrics:
    def test_implements_ports(self, metrics: OtelMetrics) -> None:
        assert isinstance(metrics, Metrics)
        assert isinstance(metrics.counter("c"), Counter)
        assert isinstance(metrics.histogram("h"), Histogram)
        assert isinstance(metrics.gauge("g"), Gauge)

    def test_counter(self, metrics: OtelMetrics, reader: InMemoryMetricReader) -> None:
        metrics.counter("requests").add(2, {"route": "/"})
        metrics.counter("requests").add(3, {"route": "/"})
        (point,) = _points(reader, "requests")
        assert point.value == 5
        assert dict(point.attributes) == {"route": "/"}

    def test_instruments_are_cached(self, metrics: OtelMetrics) -> None:
        assert metrics.counter("a") is metrics.counter("a")
        assert metrics.gauge("g") is metrics.gauge("g")
        assert metrics.histogram("h") is metrics.histogram("h")

    def test_histogram(self, metrics: OtelMetrics, reader: InMemoryMetricReader) -> None:
        hist = metrics.histogram("latency", unit="ms")
        hist.record(5)
        hist.record(15)
        (point,) = _points(reader, "latency")
        assert point.count == 2
        assert point.sum == 20

    def test_gauge_set_inc_dec(self, metrics: OtelMetrics, reader: InMemoryMetricReader) -> None:
        gauge = metrics.gauge("inflight")
        gauge.set(10)
        gauge.dec()
        gauge.dec()
        gauge.inc()
        (point,) = _points(reader, "inflight")
        assert point.value == 9
        assert gauge.value() == 9

    def test_gauge_tracks_label_sets_separately(self, metrics: OtelMetrics) -> None:
        gauge = metrics.gauge("workers")
        gauge.set(3, {"pool": "a"})
        gauge.inc({"pool": "b"})
        assert gauge.value({"pool": "a"}) == 3
        assert gauge.value({"pool": "b"}) == 1

    def test_service_name_resource(self, metrics: OtelMetrics, reader: InMemoryMetricReader) -> None:
        metrics.counter("c").add(1)
        data = reader.get_metrics_data()
        assert data.resource_metrics[0].resource.attributes["service.name"] == "billing"

    def test_flush(self, metrics: OtelMetrics) -> None:
        assert metrics.flush(1.0) is True

    def test_flush_failure_is_logged_not_raised(
        self, reader: InMemoryMetricReader, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        logger = TestLogger()
        m = OtelMetrics("svc", reader=reader, logger=logger)

        def broken(timeout_millis: float = 0) -> bool:
            raise RuntimeError("collector down")

        monkeypatch.setattr(m._provider, "force_flush", broken)
        assert m.flush(1.0) is False
        entry = logger.last_entry()
        assert entry.level == "warning"
        assert "collector down" in entry.message

    def test_close_is_idempotent(self, reader: InMemoryMetricReader) -> None:
        m = OtelMetrics("svc", reader=reader)
        m.close(1.0)
        m.close(1.0)
        assert m.flush() is True


# ---------------------------------------------------------------------------
# FakeMetricsRegistry
# ---------------------------------------------------------------------------


class TestFakeMetricsRegistry:
    def test_records_calls(self) -> None:
        m = FakeMetricsRegistry()
        m.counter("requests").add(1, {"route": "/a"})
        m.counter("requests").add(2, {"route": "/b"})
        m.assert_counter_total("requests", 3)
        assert m.counters["requests"].total_for(route="/b") == 2

    def test_gauge_and_histogram(self) -> None:
        m = FakeMetricsRegistry()
        m.gauge("g").set(4)
        m.gauge("g").dec()
        m.histogram("h").record(1.5)
        assert m.gauges["g"].current == 3
        assert m.histograms["h"].values == [1.5]

    def test_lifecycle(self) -> None:
        m = FakeMetricsRegistry()
        m.close()
        assert m.flushes == 1
        assert m.closed is True
