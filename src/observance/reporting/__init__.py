"""Reporting – mirror error records to a remote error tracker."""
from observance.reporting.frames import (
    DEFAULT_VENDOR_DIRS,
    Frame,
    StackTracer,
    capture_stacktrace,
    extract_stacktrace,
    filter_vendor_frames,
    is_vendor_path,
)
from observance.reporting.transport import ErrorReportTransport, SentryTransport
from observance.reporting.dispatcher import AsyncDispatcher
from observance.reporting.hook import DEFAULT_LEVELS, ErrorReportHook, ReportedMessage, snapshot_fields

__all__ = [
    "AsyncDispatcher",
    "DEFAULT_LEVELS",
    "DEFAULT_VENDOR_DIRS",
    "ErrorReportHook",
    "ErrorReportTransport",
    "Frame",
    "ReportedMessage",
    "SentryTransport",
    "StackTracer",
    "capture_stacktrace",
    "extract_stacktrace",
    "filter_vendor_frames",
    "is_vendor_path",
    "snapshot_fields",
]
