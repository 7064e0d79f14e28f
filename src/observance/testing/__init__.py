"""Testing support – fakes for asserting on logs, metrics and error reports."""

from observance.testing.fakes import FakeMetricsRegistry, InMemoryTransport, LogEntry, TestLogger

__all__ = ["FakeMetricsRegistry", "InMemoryTransport", "LogEntry", "TestLogger"]
