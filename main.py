import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from docforge.config import settings
from docforge.exceptions import ArchiveFormatError, UnsupportedFormatError
from docforge.middleware import RequestSizeLimitMiddleware, limiter
from docforge.routes import assets, documents, health
from docforge.services.assets import close_http_client
from docforge.services.rewrite import close_client as close_anthropic_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


class CSRFProtectionMiddleware(BaseHTTPMiddleware):
    """Validate Origin header for state-changing requests to prevent CSRF."""

    async def dispatch(self, request: Request, call_next):
        # Only check state-changing methods
        if request.method in ("POST", "PUT", "DELETE", "PATCH"):
            origin = request.headers.get("origin")
            # Allow requests without Origin (same-origin, non-browser)
            if origin and origin not in settings.cors_origins:
                return JSONResponse(
                    status_code=403,
                    content={"detail": "CSRF validation failed: invalid origin"},
                )
        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown - release shared HTTP and SDK clients
    await close_http_client()
    await close_anthropic_client()


app = FastAPI(
    title="Docforge API",
    description="Convert DOCX, TXT, RTF and HTML documents into styled PDFs",
    version="0.1.0",
    lifespan=lifespan,
)


async def unsupported_format_handler(request: Request, exc: UnsupportedFormatError):
    logger.info(f"Rejected upload: {exc}", extra={"path": request.url.path})
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def archive_format_handler(request: Request, exc: ArchiveFormatError):
    logger.warning(f"Malformed DOCX container: {exc.reason}", extra={"path": request.url.path})
    return JSONResponse(
        status_code=422,
        content={"detail": f"Invalid DOCX file ({exc.reason}).", "reason": exc.reason},
    )


app.add_exception_handler(UnsupportedFormatError, unsupported_format_handler)
app.add_exception_handler(ArchiveFormatError, archive_format_handler)

# Rate limiter state (required by slowapi)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request size limit middleware (prevents memory exhaustion)
app.add_middleware(RequestSizeLimitMiddleware)

# CSRF protection - validates Origin header for state-changing requests
app.add_middleware(CSRFProtectionMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents.router, prefix="/api", tags=["documents"])
app.include_router(assets.router, prefix="/api", tags=["assets"])
app.include_router(assets.font_files_router, prefix="/fonts", tags=["assets"])
app.include_router(health.router, prefix="/api/health", tags=["health"])
