"""Tracing for drive: request, SQL and webhook-delivery spans.

Off unless TELEMETRY_ENABLED is set. Spans go to stdout ("console") or to an
OTLP gRPC collector ("otlp"); "none" installs the provider without exporting.
Webhook deliveries run outside any request and open their own spans through
get_tracer().
"""

import logging
import threading
from typing import TYPE_CHECKING

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from drive.core.constants import API_V1_PREFIX

if TYPE_CHECKING:
    from drive.core.config import Settings

logger = logging.getLogger(__name__)

EXPORTERS = ("console", "otlp", "none")

# Health checks stay out of traces.
UNTRACED_URLS = f"{API_V1_PREFIX}/health"


def build_exporter(kind: str, otlp_endpoint: str | None = None) -> SpanExporter | None:
    """Span exporter for TELEMETRY_EXPORTER; None for "none".

    Raises:
        ValueError: Unknown kind, or "otlp" without an endpoint.
    """
    if kind == "console":
        return ConsoleSpanExporter()
    if kind == "otlp":
        if not otlp_endpoint:
            raise ValueError("TELEMETRY_OTLP_ENDPOINT is required for the otlp exporter")
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if kind == "none":
        return None
    raise ValueError(
        f"Unknown telemetry exporter {kind!r}; expected one of {', '.join(EXPORTERS)}"
    )


class TelemetryConfig:
    """Tracer provider of one drive process, with FastAPI and SQLAlchemy instrumentation."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def resource_attributes(self) -> dict[str, str]:
        return {
            SERVICE_NAME: self.service_name,
            SERVICE_VERSION: self.service_version,
            "deployment.environment": self.environment,
        }

    def start(self, app: FastAPI, engine: AsyncEngine) -> TracerProvider:
        """Install the global tracer provider, then instrument the app and the engine.

        Raises:
            ValueError: Misconfigured exporter (see build_exporter).
        """
        exporter = build_exporter(self.exporter, self.otlp_endpoint)
        provider = TracerProvider(
            resource=Resource(attributes=self.resource_attributes()),
            sampler=TraceIdRatioBased(self.sample_rate),
        )
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider

        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
        )
        SQLAlchemyInstrumentor().instrument(
            engine=engine.sync_engine, tracer_provider=provider
        )
        logger.info(
            "Tracing started: service=%s version=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.service_version,
            self.exporter,
            self.sample_rate,
        )
        return provider

    def shutdown(self) -> None:
        """Flush pending spans (webhook deliveries included) and stop the provider."""
        if self.tracer_provider is None:
            return
        self.tracer_provider.shutdown()
        self.tracer_provider = None
        logger.info("Tracing stopped")


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the process telemetry (set by the lifespan when enabled)."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry


def get_tracer(name: str) -> trace.Tracer:
    """Tracer for custom spans; the no-op tracer while telemetry is off."""
    return trace.get_tracer(name)
