"""Observability setup for OpenTelemetry, metrics, and structured logging."""

import logging

from opentelemetry import trace, metrics
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry
import structlog

from .config import settings

SERVICE_NAME = "discoverzim-api"
SERVICE_VERSION = "1.0.0"

# Prometheus metrics
REGISTRY = CollectorRegistry()

# Request metrics
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code'],
    registry=REGISTRY
)

REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=REGISTRY
)

# Business metrics
BOOKINGS_CREATED = Counter(
    'bookings_created_total',
    'Total bookings created',
    ['kind'],
    registry=REGISTRY
)

BOOKINGS_CANCELLED = Counter(
    'bookings_cancelled_total',
    'Total bookings cancelled',
    ['cancelled_by'],
    registry=REGISTRY
)

BOOKINGS_COMPLETED = Counter(
    'bookings_completed_total',
    'Total bookings marked completed',
    registry=REGISTRY
)

PAYMENT_PROOFS_UPLOADED = Counter(
    'payment_proofs_uploaded_total',
    'Total payment proofs uploaded',
    registry=REGISTRY
)

PAYMENTS_COMPLETED = Counter(
    'payments_completed_total',
    'Total payments marked completed',
    registry=REGISTRY
)

EMAILS_SENT = Counter(
    'emails_sent_total',
    'Outgoing emails by template and outcome',
    ['template', 'outcome'],
    registry=REGISTRY
)

CHAT_REPLIES = Counter(
    'chat_replies_total',
    'Chat assistant replies by source',
    ['source'],
    registry=REGISTRY
)

PENDING_EMAILS = Gauge(
    'emails_in_flight',
    'Number of fire-and-forget emails not yet finished',
    registry=REGISTRY
)


def setup_structured_logging():
    """Configure structured logging with structlog."""

    def add_trace_context(logger, method_name, event_dict):
        """Add trace context to log events."""
        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            event_dict['trace_id'] = format(ctx.trace_id, '032x')
            event_dict['span_id'] = format(ctx.span_id, '016x')
        return event_dict

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _resource(app_name: str) -> Resource:
    return Resource.create({
        "service.name": app_name,
        "service.version": SERVICE_VERSION,
        "environment": settings.environment,
    })


def setup_tracing(app_name: str = SERVICE_NAME):
    """Setup OpenTelemetry tracing."""
    trace.set_tracer_provider(TracerProvider(resource=_resource(app_name)))

    # Export only when a collector is configured
    if settings.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        span_processor = BatchSpanProcessor(otlp_exporter)
        trace.get_tracer_provider().add_span_processor(span_processor)

    tracer = trace.get_tracer(__name__)
    return tracer


def setup_metrics(app_name: str = SERVICE_NAME):
    """Setup OpenTelemetry metrics."""
    if settings.otlp_endpoint:
        otlp_exporter = OTLPMetricExporter(endpoint=settings.otlp_endpoint)
        reader = PeriodicExportingMetricReader(exporter=otlp_exporter, export_interval_millis=60000)
        metrics.set_meter_provider(MeterProvider(resource=_resource(app_name), metric_readers=[reader]))

    meter = metrics.get_meter(__name__)
    return meter


def instrument_fastapi(app):
    """Instrument FastAPI with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy():
    """Instrument SQLAlchemy with OpenTelemetry."""
    SQLAlchemyInstrumentor().instrument()


class MetricsCollector:
    """Collector for business metrics."""

    @staticmethod
    def record_booking_created(kind: str):
        """Record a booking creation for a destination, event or accommodation."""
        BOOKINGS_CREATED.labels(kind=kind).inc()

    @staticmethod
    def record_booking_cancelled(cancelled_by: str = "user"):
        """Record a booking cancellation."""
        BOOKINGS_CANCELLED.labels(cancelled_by=cancelled_by).inc()

    @staticmethod
    def record_bookings_completed(count: int):
        """Record bookings moved to completed."""
        BOOKINGS_COMPLETED.inc(count)

    @staticmethod
    def record_payment_proof_uploaded():
        """Record a payment proof upload."""
        PAYMENT_PROOFS_UPLOADED.inc()

    @staticmethod
    def record_payment_completed():
        """Record a payment being marked completed."""
        PAYMENTS_COMPLETED.inc()

    @staticmethod
    def record_email(template: str, outcome: str):
        """Record the outcome of an email dispatch."""
        EMAILS_SENT.labels(template=template, outcome=outcome).inc()

    @staticmethod
    def record_chat_reply(source: str):
        """Record where a chat reply came from (assistant or fallback)."""
        CHAT_REPLIES.labels(source=source).inc()

    @staticmethod
    def set_pending_emails(count: int):
        """Set the number of emails still being delivered."""
        PENDING_EMAILS.set(count)


def get_prometheus_metrics():
    """Get Prometheus metrics for the /metrics endpoint."""
    return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()