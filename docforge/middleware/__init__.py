"""Middleware components for request validation and protection."""

from docforge.middleware.rate_limit import get_ip_key, limiter
from docforge.middleware.size_limit import RequestSizeLimitMiddleware

__all__ = [
    "RequestSizeLimitMiddleware",
    "limiter",
    "get_ip_key",
]
