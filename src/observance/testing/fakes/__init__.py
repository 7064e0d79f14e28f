"""Testing fakes – in-memory doubles for the logger, metrics and transport ports."""
from observance.testing.fakes.logger import LogEntry, TestLogger
from observance.testing.fakes.metrics import FakeMetricsRegistry
from observance.testing.fakes.transport import InMemoryTransport

__all__ = ["FakeMetricsRegistry", "InMemoryTransport", "LogEntry", "TestLogger"]
