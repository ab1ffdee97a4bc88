"""Shared telemetry: logging setup and OpenTelemetry config."""

from drive.shared.telemetry.logging import get_logger, setup_logging
from drive.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    get_tracer,
    set_telemetry,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "get_tracer",
]
