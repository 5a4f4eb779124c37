"""OpenTelemetry instrumentation for lookout.

Exports traces via gRPC OTLP when enabled. Each pipeline stage of a run is
wrapped in a span; without a configured provider the API's no-op tracer is
used, so spans cost nothing.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace

logger = logging.getLogger(__name__)

# Configuration from environment
OTEL_ENABLED = os.getenv("OTEL_ENABLED", "false").lower() == "true"
OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "lookout")
OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")

_tracer = trace.get_tracer("lookout")


def init_telemetry(app: Any | None = None) -> bool:
    """Initialize OpenTelemetry tracing if enabled.

    Sets up:
    - TracerProvider with gRPC OTLP exporter
    - FastAPI instrumentation when an app is given

    Returns True when a provider was installed.
    """
    if not OTEL_ENABLED:
        logger.info("OpenTelemetry tracing disabled (OTEL_ENABLED=false)")
        return False

    if not OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.warning(
            "OTEL_ENABLED=true but OTEL_EXPORTER_OTLP_ENDPOINT not set. "
            "Skipping OpenTelemetry initialization."
        )
        return False

    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.semconv.resource import ResourceAttributes

        resource = Resource.create(
            {
                ResourceAttributes.SERVICE_NAME: OTEL_SERVICE_NAME,
                ResourceAttributes.DEPLOYMENT_ENVIRONMENT: os.getenv("ENVIRONMENT", "development"),
                ResourceAttributes.SERVICE_VERSION: os.getenv("APP_VERSION", "unknown"),
            }
        )

        provider = TracerProvider(resource=resource)
        exporter = OTLPSpanExporter(endpoint=OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        if app is not None:
            from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

            FastAPIInstrumentor.instrument_app(app)
            logger.info("FastAPI instrumented with OpenTelemetry")

        logger.info(
            "OpenTelemetry initialized: service=%s, endpoint=%s",
            OTEL_SERVICE_NAME,
            OTEL_EXPORTER_OTLP_ENDPOINT,
        )
        return True

    except ImportError as e:
        logger.error(
            "OpenTelemetry packages not installed: %s. "
            "Install with: pip install 'lookout[otel]'",
            e,
        )
    except Exception as e:
        logger.error("Failed to initialize OpenTelemetry: %s", e)
    return False


@contextmanager
def step_span(name: str, **attributes: Any) -> Iterator[Any]:
    """Wrap one pipeline stage in a span named ``lookout.<name>``."""
    with _tracer.start_as_current_span(f"lookout.{name}") as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"lookout.{key}", value)
        yield span


def shutdown_telemetry() -> None:
    """Shutdown OpenTelemetry tracer provider gracefully."""
    if not OTEL_ENABLED:
        return

    try:
        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
            logger.info("OpenTelemetry tracer provider shut down")
    except Exception as e:
        logger.warning("Error shutting down OpenTelemetry: %s", e)
