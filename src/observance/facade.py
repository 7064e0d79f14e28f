"""Obs – the observability facade composing a logger and an optional metrics reporter.

One root :class:`Obs` is built at startup from an :class:`ObsConfig`; each
inbound request gets a copy via :meth:`Obs.copy_with_request` whose logger
carries the request's url, method and correlation headers::

    obs = Obs.from_config(ObsConfig(app_name="billing", sentry_dsn=dsn))
    req_obs = obs.copy_with_request(RequestMetadata.from_scope(scope))
    with req_obs.panic_recover():
        ...
    obs.shutdown(timeout=2.0)
"""
from __future__ import annotations

import dataclasses
import time
from typing import Any, Mapping

from observance.config.obs import DEFAULT_HEADER_FIELDS, ObsConfig
from observance.logging.panic import PanicRecover
from observance.logging.protocol import Logger
from observance.logging.structured import new_logger
from observance.metrics.ports import Metrics
from observance.reporting.hook import ErrorReportHook
from observance.reporting.transport import SentryTransport


@dataclasses.dataclass(frozen=True)
class RequestMetadata:
    """The parts of an inbound request used for log enrichment."""
    url: str
    method: str
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def header(self, name: str) -> str:
        """Case-insensitive header lookup; ``""`` when absent."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return ""

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> "RequestMetadata":
        """Build from an ASGI HTTP scope (``url`` is the raw path plus query)."""
        path = scope.get("raw_path") or scope.get("path", "").encode()
        if isinstance(path, bytes):
            path = path.decode("latin-1")
        query = scope.get("query_string", b"")
        if isinstance(query, bytes):
            query = query.decode("latin-1")
        url = f"{path}?{query}" if query else path
        headers = {
            k.decode("latin-1"): v.decode("latin-1") for k, v in scope.get("headers", [])
        }
        return cls(url=url, method=scope.get("method", ""), headers=headers)


@dataclasses.dataclass(frozen=True)
class Obs:
    """Logger plus optional metrics reporter.

    Copies made with :meth:`copy_with_request` share :attr:`metrics` and the
    logger's sink and hooks; only the logger's fields differ.
    """

    logger: Logger
    metrics: Metrics | None = None
    header_fields: Mapping[str, str] = dataclasses.field(
        default_factory=lambda: dict(DEFAULT_HEADER_FIELDS)
    )
    _state: dict[str, bool] = dataclasses.field(
        default_factory=lambda: {"shut_down": False}, repr=False, compare=False
    )

    @classmethod
    def from_config(cls, config: ObsConfig) -> "Obs":
        """Build the root facade.

        A Sentry hook is attached iff ``config.sentry_dsn`` is set and a
        metrics reporter is created iff ``config.metrics_url`` is set.

        Raises
        ------
        InvalidLevelError
            Unparseable ``log_level``.
        InvalidConfigError
            Malformed DSN or other invalid settings.
        """
        logger = new_logger(config.log_level, config.app_name)

        if config.sentry_dsn:
            transport = SentryTransport(config.sentry_dsn)
            logger.add_hook(
                ErrorReportHook(
                    transport,
                    release=config.version or None,
                    environment=config.environment or None,
                )
            )

        metrics: Metrics | None = None
        if config.metrics_url:
            from observance.metrics.otel import OtelMetrics

            metrics = OtelMetrics(
                config.app_name,
                endpoint=config.metrics_url,
                flush_interval=config.metrics_flush_interval,
                logger=logger,
            )

        return cls(logger=logger, metrics=metrics, header_fields=dict(config.header_fields))

    def copy_with_request(self, request: RequestMetadata) -> "Obs":
        """Request-scoped copy whose logger carries ``url``, ``method`` and
        every configured header field that is present and non-empty.

        The copy shares the metrics reporter, the logger sink and hooks, and
        the shutdown state: calling :meth:`shutdown` on a copy shuts down the
        root as well.
        """
        fields: dict[str, Any] = {"url": request.url, "method": request.method}
        for header, field_name in self.header_fields.items():
            value = request.header(header)
            if value:
                fields[field_name] = value
        return dataclasses.replace(self, logger=self.logger.with_fields(fields))

    def panic_recover(self) -> PanicRecover:
        """Guard for a unit of work: logs and suppresses an escaping exception."""
        return PanicRecover(self.logger)

    def shutdown(self, timeout: float = 2.0) -> bool:
        """Deliver pending error reports, release the reporting hooks and
        close the metrics reporter.

        Bounded by *timeout*; calling it again is a no-op.
        """
        if self._state["shut_down"]:
            return True
        self._state["shut_down"] = True
        deadline = time.monotonic() + max(timeout, 0.0)

        drained = True
        close = getattr(self.logger, "close", None)
        if close is not None:
            drained = close(timeout)
        if self.metrics is not None:
            self.metrics.close(max(deadline - time.monotonic(), 0.0))
        return drained


__all__ = ["Obs", "RequestMetadata"]
