"""Monitor configuration."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pystatus.errors import ConfigError
from pystatus.span import SpanConfig


def _default_spans() -> list[SpanConfig]:
    """Return the default 1s, 5s and 15s spans of 60 entries each."""
    return [
        SpanConfig(interval=1, retention=60),
        SpanConfig(interval=5, retention=60),
        SpanConfig(interval=15, retention=60),
    ]


class MonitorConfig(BaseModel):
    """Configuration of the monitor and its request instrumentation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "/status"
    title: str = "pystatus"
    spans: list[SpanConfig] = Field(default_factory=_default_spans, min_length=1)
    request_timeout: float | None = Field(default=None, gt=0)  # Seconds


def load_config(overrides: Mapping[str, Any] | None = None) -> MonitorConfig:
    """
    Build a MonitorConfig from defaults and ``overrides``.

    Top-level keys in ``overrides`` replace the defaults as a whole; a given
    ``spans`` list replaces the default spans entirely.

    Raises:
        ConfigError: If the resulting configuration is invalid.
    """
    try:
        return MonitorConfig.model_validate(dict(overrides or {}))
    except ValidationError as exc:
        raise ConfigError(f"invalid monitor configuration: {exc}") from exc
