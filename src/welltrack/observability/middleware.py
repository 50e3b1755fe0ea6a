"""Middleware for request/response metrics."""
import time
from typing import Any, Dict, Iterable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from prometheus_client import Counter, Histogram, Gauge


# HTTP metrics
http_requests_total = Counter(
    'welltrack_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'welltrack_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

http_requests_in_progress = Gauge(
    'welltrack_http_requests_in_progress',
    'HTTP requests currently in progress',
    ['method']
)


def _fill(template: str, path_params: Dict[str, Any]) -> str:
    path = template
    for name, value in path_params.items():
        path = path.replace(f"{{{name}}}", str(value))
    return path


def route_template(scope: Dict[str, Any]) -> str:
    """
    Resolve the route path template of a request that has been routed.

    Subject ids appear in most paths, so labels use
    ``/api/v1/analyze/{subject_id}`` rather than the concrete URL. The
    router records the matched route and its path parameters in the ASGI
    scope; nested routers may record a template relative to their prefix,
    in which case the parameter values are swapped back into the full path.

    Args:
        scope: ASGI scope after the request went through the router

    Returns:
        str: Path template, or ``unmatched`` when no route handled it
    """
    path = scope.get("path", "")
    path_params = scope.get("path_params") or {}
    route = scope.get("route")

    template = getattr(route, "path_format", None) or getattr(route, "path", None)
    if template and _fill(template, path_params) == path:
        return template

    if route is None and "endpoint" not in scope:
        return "unmatched"

    names = {str(value): name for name, value in path_params.items()}
    return "/".join(
        f"{{{names[segment]}}}" if segment in names else segment
        for segment in path.split("/")
    )


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP request metrics."""

    def __init__(self, app, skip_paths: Iterable[str] = ("/api/v1/metrics",)):
        super().__init__(app)
        self.skip_paths = set(skip_paths)

    async def dispatch(self, request: Request, call_next):
        """
        Process request and track metrics.

        The endpoint label is resolved after the handler ran, once routing
        has filled in the scope.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response
        """
        if request.url.path in self.skip_paths:
            return await call_next(request)

        method = request.method
        start_time = time.perf_counter()
        http_requests_in_progress.labels(method=method).inc()
        status = 500

        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            endpoint = route_template(request.scope)
            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=status
            ).inc()
            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(time.perf_counter() - start_time)
            http_requests_in_progress.labels(method=method).dec()
