from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..routes_metrics import http_errors_total


def route_label(request: Request) -> str:
    """Return the matched route template, e.g. ``/gstin/{gstin}``.

    Paths that match no route share the ``unmatched`` label, keeping the
    label set bounded by the app's routes.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class HttpErrorCounterMiddleware(BaseHTTPMiddleware):
    """Count 4xx/5xx responses per route template and status code."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if response.status_code >= 400:
            http_errors_total.labels(
                route=route_label(request), status=str(response.status_code)
            ).inc()
        return response
