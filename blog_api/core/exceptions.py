"""App-wide exception handlers.

Every error leaves the API as JSON. HTTP errors use ``{"error": ...}``,
request validation failures use ``{field: [messages]}`` and anything
unexpected becomes a bare 500 without internals.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.core.logging import get_logger

logger = get_logger("errors")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = loc[-1] if loc else "base"
        errors.setdefault(field, []).append(error.get("msg", "is invalid"))
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    # Only reached for errors raised outside RequestLoggingMiddleware
    app.add_exception_handler(Exception, unhandled_exception_handler)
