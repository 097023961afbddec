"""Logging, OpenTelemetry tracing, and span helpers for use-case methods."""

from app.shared.telemetry.logging import get_logger, setup_logging
from app.shared.telemetry.telemetry import (
    configure_tracing,
    get_tracer_provider,
    instrument_app,
    instrument_engine,
    shutdown_tracing,
)
from app.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "add_span_attributes",
    "configure_tracing",
    "get_logger",
    "get_tracer_provider",
    "instrument_app",
    "instrument_engine",
    "setup_logging",
    "shutdown_tracing",
    "traced",
]
