"""
Request logging middleware for the SecureYou alerts service.

Each request gets a correlation id (the caller's ``X-Request-ID`` or a
fresh one) bound into :mod:`structlog.contextvars`, so the dispatcher and
channel events of one SOS request share it with the ``http_request`` line.
The id is echoed back in the ``X-Request-ID`` response header.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Endpoints whose envelope carries a ``success`` flag worth logging.
_SOS_PREFIX = "/send-sos-"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one ``http_request`` event per request, tagged with its request id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
        path = request.url.path

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)

            fields = {
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": duration_ms,
            }
            if path.startswith(_SOS_PREFIX) and request.method == "POST":
                fields["success"] = getattr(request.state, "sos_success", False)

            if response.status_code >= 500:
                logger.error("http_request", **fields)
            elif response.status_code >= 400:
                logger.warning("http_request", **fields)
            else:
                logger.info("http_request", **fields)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
