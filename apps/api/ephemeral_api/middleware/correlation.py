"""Correlation ID and request timing middleware."""

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ephemeral_api.utils import metrics

logger = logging.getLogger(__name__)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation ID and record its duration."""

    async def dispatch(self, request: Request, call_next):
        """Process request with correlation ID."""
        correlation_id = request.headers.get("x-correlation-id") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = time.perf_counter() - started

        # Route template keeps label cardinality bounded
        route = request.scope.get("route")
        path = getattr(route, "path", "unmatched")
        metrics.request_duration.labels(method=request.method, path=path).observe(elapsed)
        logger.debug(f"{request.method} {path} -> {response.status_code} [{correlation_id}]")

        response.headers["x-correlation-id"] = correlation_id
        return response
