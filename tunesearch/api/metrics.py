"""
Prometheus metrics for the TuneSearch API.

Exposes request counters, latency histograms and upstream call outcomes
that can be scraped by Prometheus at ``/metrics``.

Usage in ``app.py``::

    from tunesearch.api.metrics import PrometheusMiddleware
    app.add_middleware(PrometheusMiddleware)
"""

import re
import time
from typing import Callable

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "tunesearch_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "tunesearch_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

UPSTREAM_REQUESTS = Counter(
    "tunesearch_upstream_requests_total",
    "Calls made to upstream search APIs",
    ["provider", "outcome"],
)

APP_INFO = Info(
    "tunesearch",
    "TuneSearch application information",
)


def set_app_info(version: str, environment: str) -> None:
    """Set application info metric (call once at startup)."""
    APP_INFO.info({"version": version, "environment": environment})


def record_upstream(provider: str, outcome: str) -> None:
    """Count one upstream call; ``outcome`` is "ok" or an error code."""
    UPSTREAM_REQUESTS.labels(provider=provider, outcome=outcome.lower()).inc()


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

def _normalise_path(path: str) -> str:
    """
    Collapse path parameters to reduce cardinality.

    ``/api/youtube/video/dQw4w9WgXcQ`` → ``/api/youtube/video/{id}``
    """
    return re.sub(r"^(/api/youtube/video)/[^/]+$", r"\1/{id}", path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that records Prometheus metrics per request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method
        path = _normalise_path(request.url.path)

        if path.endswith("/metrics"):
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        status = str(response.status_code)
        REQUEST_COUNT.labels(method=method, endpoint=path, status_code=status).inc()
        REQUEST_LATENCY.labels(method=method, endpoint=path).observe(duration)

        return response


# ---------------------------------------------------------------------------
# /metrics endpoint helper
# ---------------------------------------------------------------------------

def metrics_response() -> Response:
    """Generate a Prometheus-format ``/metrics`` response."""
    body = generate_latest(REGISTRY)
    return Response(content=body, media_type=CONTENT_TYPE_LATEST)
