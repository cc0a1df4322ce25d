"""HTTP middleware for Prometheus metrics instrumentation."""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .metrics import HTTP_REQUEST_DURATION_SECONDS, HTTP_REQUESTS_TOTAL


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records HTTP request metrics."""

    # Endpoints to exclude from metrics (avoid self-referential loops)
    EXCLUDE_PATHS = {"/metrics", "/api/health"}

    # Only known routes become label values; anything else is "other"
    KNOWN_PATHS = {
        "/api/disease-terms",
        "/api/mask",
        "/api/chat",
        "/api/clean-text",
    }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        if path in self.EXCLUDE_PATHS:
            return await call_next(request)

        endpoint = self._normalize_path(path)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        HTTP_REQUESTS_TOTAL.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=request.method, endpoint=endpoint).observe(
            duration
        )

        return response

    @classmethod
    def _normalize_path(cls, path: str) -> str:
        """Collapse unknown paths to a single label value."""
        normalized = path.rstrip("/") or "/"
        return normalized if normalized in cls.KNOWN_PATHS else "other"
