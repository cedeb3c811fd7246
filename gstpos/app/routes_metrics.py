# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

bills_generated_total = Counter("bills_generated_total", "Total bills generated")
bills_generated_total.inc(0)

http_errors_total = Counter(
    "http_errors_total", "HTTP error responses by route template", ["route", "status"]
)

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
