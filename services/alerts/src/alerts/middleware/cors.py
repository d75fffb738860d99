"""
CORS handling for the SecureYou alerts service.

The mobile and web clients call the service cross-origin.  Preflight
``OPTIONS`` requests are answered with an empty 200, and every other
response carries a permissive ``Access-Control-Allow-Origin`` header.
"""

from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOW_ORIGIN = "*"
ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Short-circuit preflights and stamp the allow-origin header on responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(
                status_code=200,
                headers={
                    "Access-Control-Allow-Origin": ALLOW_ORIGIN,
                    "Access-Control-Allow-Headers": ALLOW_HEADERS,
                },
            )
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = ALLOW_ORIGIN
        return response


def add_cors(app: FastAPI) -> None:
    """Attach the permissive CORS middleware to *app*."""
    app.add_middleware(PermissiveCORSMiddleware)
