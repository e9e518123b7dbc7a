"""OpenTelemetry exporter settings read from the application configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class TelemetryConfigError(ValueError):
    """The telemetry settings are malformed."""


@dataclass(frozen=True)
class HttpTransport:
    """Export over OTLP/HTTP to a collector at ``url``."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)

    def endpoint(self, signal: str) -> str:
        """Return the collector URL for a signal such as ``traces``."""
        return f"{self.url}/v1/{signal}"

    @classmethod
    def _from_mapping(cls, data: Mapping[str, Any]) -> HttpTransport:
        url = data.get("url")
        if not isinstance(url, str):
            raise TelemetryConfigError("transport.url must be a string")
        headers = data.get("headers", {})
        if not isinstance(headers, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            raise TelemetryConfigError("transport.headers must map strings to strings")
        return cls(url=url, headers=dict(headers))


_TRANSPORTS = {"HTTP": HttpTransport}


@dataclass(frozen=True)
class OtelConfig:
    """The ``otel`` initializer settings."""

    transport: HttpTransport

    @classmethod
    def from_mapping(cls, data: Any) -> OtelConfig:
        """Build from a mapping of the form ``{"common": {"transport": {...}}}``."""
        if not isinstance(data, Mapping):
            raise TelemetryConfigError("otel settings must be a mapping")
        common = data.get("common")
        if not isinstance(common, Mapping):
            raise TelemetryConfigError("missing field `common`")
        transport = common.get("transport")
        if not isinstance(transport, Mapping):
            raise TelemetryConfigError("missing field `transport`")
        kind = transport.get("type")
        if kind is None:
            raise TelemetryConfigError("missing field `type`")
        transport_cls = _TRANSPORTS.get(kind)
        if transport_cls is None:
            raise TelemetryConfigError(f"unknown variant `{kind}`, expected `HTTP`")
        return cls(transport=transport_cls._from_mapping(transport))


def load_otel_config(initializers: Mapping[str, Any] | None) -> OtelConfig | None:
    """Return the ``otel`` settings, or None with a warning when they are absent."""
    settings = initializers.get("otel") if initializers is not None else None
    if settings is None:
        logger.warning(
            "OpenTelemetry configuration not found in the settings. "
            "Please ensure it is properly configured."
        )
        return None
    return OtelConfig.from_mapping(settings)