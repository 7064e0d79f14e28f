"""Config – ObsConfig, the construction-time observability configuration."""
from __future__ import annotations

import dataclasses

from observance.config.settings.base import Settings
from observance.config.validation import InvalidConfigError

DEFAULT_HEADER_FIELDS: dict[str, str] = {
    "X-Request-ID": "requestId",
    "X-Account-ID": "accountId",
}


@dataclasses.dataclass
class ObsConfig(Settings):
    """Everything needed to set up logging, error reporting and metrics.

    Loaded from ``OBS_*`` environment variables by
    :class:`~observance.config.settings.EnvSettingsLoader`, or built directly.

    Attributes
    ----------
    app_name:
        Logged as ``name`` on every record and used as the metrics service name.
    log_level:
        Minimum severity written to the sink (``trace`` … ``panic``).
    sentry_dsn:
        When set, ``error`` and above are mirrored to Sentry.
    version:
        Release tag attached to Sentry events.
    environment:
        Environment tag attached to Sentry events.
    metrics_url:
        When set, metrics are pushed to this OTLP/HTTP endpoint.
    metrics_flush_interval:
        Seconds between two metric pushes.
    header_fields:
        Request header name -> log field name, applied per request.
    """

    _prefix = "OBS"

    app_name: str
    log_level: str = "info"
    sentry_dsn: str = ""
    version: str = ""
    environment: str = ""
    metrics_url: str = ""
    metrics_flush_interval: float = 10.0
    header_fields: dict[str, str] = dataclasses.field(
        default_factory=lambda: dict(DEFAULT_HEADER_FIELDS)
    )

    def _validate(self) -> None:
        from observance.logging.severity import Severity

        if not self.app_name or not self.app_name.strip():
            raise InvalidConfigError("app_name", self.app_name, "must not be empty")

        Severity.parse(self.log_level)

        if self.metrics_url and self.metrics_flush_interval <= 0:
            raise InvalidConfigError(
                "metrics_flush_interval", self.metrics_flush_interval, "must be positive"
            )

        if self.sentry_dsn:
            from sentry_sdk.utils import BadDsn, Dsn

            try:
                Dsn(self.sentry_dsn)
            except (BadDsn, ValueError) as exc:
                raise InvalidConfigError("sentry_dsn", self.sentry_dsn, str(exc)) from exc

        for header, field_name in self.header_fields.items():
            if not header.strip() or not field_name.strip():
                raise InvalidConfigError(
                    "header_fields", {header: field_name}, "header and field names must not be empty"
                )


__all__ = ["DEFAULT_HEADER_FIELDS", "ObsConfig"]
