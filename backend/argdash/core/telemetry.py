"""OpenTelemetry wiring for the dashboard API and its upstream calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes

from argdash.config import AppSettings

logger = logging.getLogger(__name__)

UPSTREAM_ATTRIBUTE = "argdash.upstream"
METRIC_EXPORT_INTERVAL_MS = 15000

_TELEMETRY_INITIALISED = False


@dataclass
class TelemetryProviders:
    tracer: TracerProvider
    meter: MeterProvider
    logs: LoggerProvider


def upstream_hosts(settings: AppSettings) -> dict[str, str]:
    """Map each configured upstream host to the name used on its client spans."""

    configured = {
        "argenstats": settings.argenstats_base_url,
        "bcra": settings.bcra_base_url,
        "series": settings.series_base_url,
        "presupuesto": settings.presupuesto_base_url,
    }
    return {urlsplit(url).hostname: name for name, url in configured.items() if url}


def upstream_span_hook(settings: AppSettings) -> Callable[[Any, Any], Any]:
    """Build an httpx request hook that tags client spans with the upstream they hit."""

    hosts = upstream_hosts(settings)

    async def hook(span: Any, request: Any) -> None:
        if span is None or not span.is_recording():
            return
        name = hosts.get(request.url.host)
        if name:
            span.set_attribute(UPSTREAM_ATTRIBUTE, name)

    return hook


def _build_providers(settings: AppSettings) -> TelemetryProviders:
    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: "argdash",
        }
    )
    options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint

    tracer = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**options)))

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(**options),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    meter = MeterProvider(resource=resource, metric_readers=[reader])

    logs = LoggerProvider(resource=resource)
    logs.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(**options)))
    return TelemetryProviders(tracer=tracer, meter=meter, logs=logs)


def setup_telemetry(app: FastAPI, settings: AppSettings) -> Optional[TelemetryProviders]:
    """Export traces, metrics and logs over OTLP when enabled.

    Incoming requests are traced by the FastAPI instrumentor; outbound upstream
    calls by the httpx instrumentor, with an ``argdash.upstream`` attribute naming
    the provider. The upstream outcome counters in :mod:`argdash.core.metrics`
    ride on the global meter provider installed here.
    """

    global _TELEMETRY_INITIALISED  # noqa: PLW0603

    if _TELEMETRY_INITIALISED:
        return None
    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return None

    providers = _build_providers(settings)
    trace.set_tracer_provider(providers.tracer)
    metrics.set_meter_provider(providers.meter)
    set_logger_provider(providers.logs)
    LoggingInstrumentor().instrument(set_logging_format=False)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=providers.tracer,
        meter_provider=providers.meter,
        excluded_urls="health",
    )
    HTTPXClientInstrumentor().instrument(
        tracer_provider=providers.tracer,
        async_request_hook=upstream_span_hook(settings),
    )

    _TELEMETRY_INITIALISED = True
    logger.info("Telemetry exporting to %s", settings.telemetry_otlp_endpoint or "the default OTLP endpoint")
    return providers


__all__ = ["TelemetryProviders", "setup_telemetry", "upstream_hosts", "upstream_span_hook"]
