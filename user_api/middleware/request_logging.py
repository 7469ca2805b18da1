"""Request logging middleware to trace requests and durations.

- Adds a unique X-Request-ID header to responses (and uses any incoming header)
- Logs method, path, status, duration and client IP
- Does not log request/response bodies to avoid leaking passwords
"""
from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from user_api.core.logging import bind_request_id, reset_request_id


logger = logging.getLogger("user_api.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request/response metadata for tracing."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        start = time.monotonic()

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        client_ip = request.client.host if request.client else None

        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - we still want to log then reraise
            reset_request_id(token)
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.exception(
                "Unhandled exception during request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": client_ip,
                    "request_id": request_id,
                    "duration_ms": duration_ms,
                },
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Request finished",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": client_ip,
                "request_id": request_id,
            },
        )
        reset_request_id(token)

        # Return request-id to client so traces can be correlated externally
        response.headers.setdefault("X-Request-ID", request_id)
        return response
