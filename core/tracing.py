import os

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

log = structlog.get_logger(__name__)


def init_tracer(app_name: str = "checkout-proxy"):
    """Initialize OpenTelemetry tracer with OTLP exporter"""
    provider = TracerProvider(resource=Resource.create({"service.name": app_name}))

    # Spans are still created when disabled (useful in tests), just never exported
    if os.getenv("DISABLE_TRACING", "").lower() in {"1", "true", "yes"}:
        trace.set_tracer_provider(provider)
        return

    try:
        exporter = OTLPSpanExporter()
    except Exception as exc:
        log.warning("OTLP exporter unavailable, tracing to console", error=str(exc))
        exporter = ConsoleSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
