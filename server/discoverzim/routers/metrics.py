"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response

from ..core.observability import get_prometheus_metrics, metrics_collector
from ..services.mailer import mail_dispatcher

router = APIRouter(tags=["observability"])

PROMETHEUS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


@router.get("/metrics", response_class=Response, summary="Prometheus metrics")
async def metrics() -> Response:
    """Booking, payment, mail and chat counters in the Prometheus text format."""
    metrics_collector.set_pending_emails(mail_dispatcher.pending)
    return Response(content=get_prometheus_metrics(), media_type=PROMETHEUS_CONTENT_TYPE)
