"""Request body size limit middleware."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from docforge.config import settings

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject uploads whose declared Content-Length exceeds the configured maximum.

    Uploads arrive base64-encoded inside JSON, so the limit applies to the
    encoded request body rather than to the document itself.
    """

    def __init__(self, app, max_size: int | None = None):
        super().__init__(app)
        self.max_size = max_size or settings.max_request_size_bytes

    def _declared_size(self, request: Request) -> int | None:
        content_length = request.headers.get("content-length")
        if not content_length:
            return None
        try:
            return int(content_length)
        except ValueError:
            # Malformed header; the server rejects it downstream
            return None

    async def dispatch(self, request: Request, call_next):
        size = self._declared_size(request)
        if size is not None and size > self.max_size:
            logger.warning(
                f"Upload too large: {size} bytes (max: {self.max_size})",
                extra={
                    "content_length": size,
                    "max_size": self.max_size,
                    "path": request.url.path,
                },
            )
            return JSONResponse(
                status_code=413,
                content={"detail": f"Request body exceeds maximum size of {self.max_size} bytes"},
            )

        return await call_next(request)
