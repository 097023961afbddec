"""OpenTelemetry tracer provider for the hierarchy service.

configure_tracing() builds one process-wide provider from Settings and
registers it globally. The FastAPI app is instrumented at startup; the
SQLAlchemy engine is instrumented when database.py builds it, which can
happen after startup because the engine is created lazily.
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings

logger = logging.getLogger(__name__)

# Probes are polled constantly and carry no hierarchy data.
EXCLUDED_URLS = "/api/v1/health,/api/v1/health/ready"

_provider: TracerProvider | None = None
_lock = threading.Lock()


def _span_processor(settings: Settings) -> SpanProcessor | None:
    if settings.telemetry_exporter == "none":
        return None
    if settings.telemetry_exporter == "otlp":
        if settings.telemetry_otlp_endpoint:
            endpoint = settings.telemetry_otlp_endpoint
            return BatchSpanProcessor(
                OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
            )
        logger.warning("telemetry_exporter=otlp without telemetry_otlp_endpoint; using console")
    return BatchSpanProcessor(ConsoleSpanExporter())


def configure_tracing(settings: Settings) -> TracerProvider | None:
    """Create and register the global tracer provider. Returns None when disabled."""
    global _provider
    if not settings.telemetry_enabled:
        logger.info("Tracing disabled")
        return None
    resource = Resource.create(
        {
            SERVICE_NAME: settings.app_name,
            SERVICE_VERSION: settings.app_version,
            "deployment.environment": settings.telemetry_environment,
        }
    )
    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_rate)),
    )
    processor = _span_processor(settings)
    if processor is not None:
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    with _lock:
        _provider = provider
    logger.info(
        "Tracing enabled: exporter=%s sample_rate=%s",
        settings.telemetry_exporter,
        settings.telemetry_sample_rate,
    )
    return provider


def get_tracer_provider() -> TracerProvider | None:
    with _lock:
        return _provider


def instrument_app(app: FastAPI) -> None:
    provider = get_tracer_provider()
    if provider is None:
        return
    FastAPIInstrumentor.instrument_app(
        app, tracer_provider=provider, excluded_urls=EXCLUDED_URLS
    )


def instrument_engine(engine: AsyncEngine) -> None:
    """Trace queries on engine. No-op until configure_tracing has run."""
    provider = get_tracer_provider()
    if provider is None:
        return
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=provider)


def shutdown_tracing() -> None:
    """Flush pending spans and forget the provider."""
    global _provider
    with _lock:
        provider, _provider = _provider, None
    if provider is not None:
        provider.shutdown()
