"""Per-client rate limiting using SlowAPI with in-memory storage."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from docforge.config import settings


def get_ip_key(request: Request) -> str:
    """Rate-limit key for a request. There are no accounts, so clients are keyed by IP."""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_ip_key,
    storage_uri=settings.rate_limit_storage_uri,
    default_limits=[f"{settings.rate_limit_general_per_minute}/minute"],
    headers_enabled=True,  # Include X-RateLimit-* headers in responses
    enabled=settings.rate_limit_enabled,
)


def rate_limit_convert():
    """Decorator for the extraction and PDF generation endpoints."""
    return limiter.limit(f"{settings.rate_limit_convert_per_minute}/minute")
