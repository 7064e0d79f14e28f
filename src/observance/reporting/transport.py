"""Reporting – ErrorReportTransport port and the Sentry adapter."""
from __future__ import annotations

import abc
from typing import Any

import sentry_sdk
from sentry_sdk.utils import BadDsn, Dsn

from observance.config.validation import InvalidConfigError
from observance.errors import DeliveryError


class ErrorReportTransport(abc.ABC):
    """Port: submit an assembled event to a remote error tracker."""

    @abc.abstractmethod
    def send(self, event: dict[str, Any]) -> None:
        """Submit *event*; raise :class:`DeliveryError` on failure."""

    @abc.abstractmethod
    def flush(self, timeout: float) -> bool:
        """Block until submitted events are delivered or *timeout* elapses."""

    def close(self, timeout: float) -> None:
        self.flush(timeout)


class SentryTransport(ErrorReportTransport):
    """Delivers events through a dedicated ``sentry_sdk.Client``.

    The client is not bound to the global hub and runs without default
    integrations, so it only ever sends what this package hands to it.

    Raises
    ------
    InvalidConfigError
        When *dsn* cannot be parsed.
    """

    def __init__(
        self,
        dsn: str,
        *,
        release: str | None = None,
        environment: str | None = None,
        **options: Any,
    ) -> None:
        try:
            Dsn(dsn)
        except (BadDsn, ValueError) as exc:
            raise InvalidConfigError("sentry_dsn", dsn, str(exc)) from exc

        options.setdefault("default_integrations", False)
        options.setdefault("auto_enabling_integrations", False)
        if release:
            options["release"] = release
        if environment:
            options["environment"] = environment
        self._client = sentry_sdk.Client(dsn=dsn, **options)

    @property
    def client(self) -> Any:
        return self._client

    def send(self, event: dict[str, Any]) -> None:
        try:
            self._client.capture_event(event)
        except Exception as exc:
            raise DeliveryError("sentry rejected event", cause=exc) from exc

    def flush(self, timeout: float) -> bool:
        self._client.flush(timeout=timeout)
        return True

    def close(self, timeout: float) -> None:
        self._client.close(timeout=timeout)


__all__ = ["ErrorReportTransport", "SentryTransport"]
