"""Access logging with a per-request correlation ID."""

import re
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from blog_api.core.exceptions import unhandled_exception_handler
from blog_api.core.logging import get_logger

logger = get_logger("access")

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs are echoed back, so only accept short opaque tokens
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _request_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _VALID_REQUEST_ID.match(supplied):
        return supplied
    return uuid.uuid4().hex


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and return the request ID to the client.

    Never logs headers or bodies, so tokens and passwords stay out of logs.
    Unhandled errors are turned into the JSON 500 here rather than in
    Starlette's outermost ServerErrorMiddleware, so that response still
    passes back through this and the security headers middleware.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            response = await unhandled_exception_handler(request, exc)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
