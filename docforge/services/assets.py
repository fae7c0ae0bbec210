"""Static font lookup and remote logo fetching."""

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from docforge.config import settings
from docforge.services.pdf.images import LogoAsset

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = {".ttf", ".otf"}
DEFAULT_LOGO_CONTENT_TYPE = "image/png"


# Module-level HTTP client for connection reuse
_http_client: httpx.AsyncClient | None = None


def _get_http_client() -> httpx.AsyncClient:
    """Get shared HTTP client for connection reuse."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=settings.logo_fetch_timeout_seconds, follow_redirects=True
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client. Called on application shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


class LogoFetchError(Exception):
    """The logo URL could not be fetched as an image."""

    pass


@dataclass(frozen=True)
class FontFile:
    name: str
    url: str


async def download_logo(url: str, max_size: int | None = None) -> LogoAsset:
    """
    Fetch logo bytes from a URL.

    Args:
        url: Absolute http(s) URL of the image
        max_size: Byte cap on the response body (settings default when None)

    Returns:
        LogoAsset with the response body and its declared content type

    Raises:
        LogoFetchError: If the URL is invalid, the server answers with an
            error status, or the body exceeds the size cap
    """
    max_size = max_size or settings.max_logo_size_bytes
    if not url.startswith(("http://", "https://")):
        raise LogoFetchError(f"Unsupported logo URL scheme: {url}")

    client = _get_http_client()
    try:
        response = await client.get(url)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise LogoFetchError(f"Unable to load logo from {url}: {e}") from e

    if len(response.content) > max_size:
        raise LogoFetchError(f"Logo exceeds size limit: {len(response.content)} > {max_size} bytes")

    content_type = response.headers.get("content-type") or DEFAULT_LOGO_CONTENT_TYPE
    return LogoAsset(data=response.content, content_type=content_type.split(";")[0].strip())


async def fetch_logo(url: str | None) -> LogoAsset | None:
    """Fetch a logo for PDF decoration; any failure omits the logo instead of failing."""
    if not url:
        return None
    try:
        return await download_logo(url)
    except LogoFetchError as e:
        logger.warning(f"Omitting logo: {e}", extra={"logo_url": url})
        return None


def list_font_files(fonts_dir: str | Path | None = None) -> list[FontFile]:
    """
    List the font files served from the static font directory.

    Returns:
        .ttf/.otf files sorted case-insensitively; empty when the directory
        does not exist
    """
    directory = Path(fonts_dir or settings.fonts_dir)
    if not directory.is_dir():
        return []

    names = [
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() in FONT_EXTENSIONS
    ]
    return [FontFile(name=name, url=f"/fonts/{name}") for name in sorted(names, key=str.lower)]


def load_font_file(fonts_dir: str | Path | None, name: str) -> bytes:
    """
    Read one font file by name.

    Raises:
        FileNotFoundError: If the name is not a font file directly inside the
            font directory (path components and traversal are rejected)
    """
    directory = Path(fonts_dir or settings.fonts_dir).resolve()
    candidate = (directory / name).resolve()
    if (
        Path(name).name != name
        or candidate.parent != directory
        or candidate.suffix.lower() not in FONT_EXTENSIONS
        or not candidate.is_file()
    ):
        raise FileNotFoundError(f"Font not found: {name}")
    return candidate.read_bytes()
