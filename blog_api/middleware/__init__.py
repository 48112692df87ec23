"""Middleware module for the Blog API."""

from blog_api.middleware.request_logging import RequestLoggingMiddleware
from blog_api.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
