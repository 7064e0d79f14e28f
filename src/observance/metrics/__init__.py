"""Metrics – ports and the OpenTelemetry push reporter."""
from observance.metrics.ports import Counter, Gauge, Histogram, Metrics
from observance.metrics.otel import OtelMetrics

__all__ = ["Counter", "Gauge", "Histogram", "Metrics", "OtelMetrics"]
