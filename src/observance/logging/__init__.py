"""Observability – structured logging, severity model and panic guard."""
from observance.logging.severity import REMOTE_LEVELS, Severity, compare, to_remote_level
from observance.logging.protocol import ERROR_KEY, Fields, Logger
from observance.logging.sink import LogSink
from observance.logging.hooks import Hook, LevelHooks
from observance.logging.structured import StructLogger, new_logger, process_identity
from observance.logging.panic import PanicRecover, log_panic, panic_recover, run_guarded

__all__ = [
    "ERROR_KEY",
    "Fields",
    "Hook",
    "LevelHooks",
    "LogSink",
    "Logger",
    "PanicRecover",
    "REMOTE_LEVELS",
    "Severity",
    "StructLogger",
    "compare",
    "log_panic",
    "new_logger",
    "panic_recover",
    "process_identity",
    "run_guarded",
    "to_remote_level",
]
