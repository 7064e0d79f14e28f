"""
observance – structured logging, error reporting and metrics for services.

Import path convention::

    from observance import Obs, ObsConfig
    from observance.logging import Severity, new_logger
    from observance.reporting import ErrorReportHook, SentryTransport
    from observance.testing import TestLogger
"""

from observance.config import ConfigError, InvalidConfigError, InvalidLevelError, ObsConfig
from observance.errors import DeliveryError, ObservanceError, SinkWriteError
from observance.facade import Obs, RequestMetadata
from observance.logging import Logger, PanicRecover, Severity, StructLogger, new_logger, panic_recover
from observance.metrics import Metrics

__version__ = "0.1.0"
__all__ = [
    "ConfigError",
    "DeliveryError",
    "InvalidConfigError",
    "InvalidLevelError",
    "Logger",
    "Metrics",
    "Obs",
    "ObsConfig",
    "ObservanceError",
    "PanicRecover",
    "RequestMetadata",
    "Severity",
    "SinkWriteError",
    "StructLogger",
    "__version__",
    "new_logger",
    "panic_recover",
]
