"""Font listing, font files, and the logo proxy."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from docforge.config import settings
from docforge.services.assets import LogoFetchError, download_logo, list_font_files, load_font_file

logger = logging.getLogger(__name__)

router = APIRouter()

# Serves the files referenced by /api/fonts, mounted at /fonts
font_files_router = APIRouter()

FONT_MEDIA_TYPES = {".ttf": "font/ttf", ".otf": "font/otf"}
LOGO_CACHE_CONTROL = "public, max-age=3600"


class FontEntry(BaseModel):
    name: str
    url: str


class FontListResponse(BaseModel):
    fonts: list[FontEntry]


@router.get("/fonts", response_model=FontListResponse)
async def list_fonts():
    """List the font files available to the client."""
    try:
        fonts = list_font_files(settings.fonts_dir)
    except OSError as e:
        logger.exception(f"Failed to read font directory {settings.fonts_dir}")
        raise HTTPException(500, "Unable to load font list.") from e
    return FontListResponse(fonts=[FontEntry(name=font.name, url=font.url) for font in fonts])


@router.get("/logo-proxy")
async def logo_proxy(url: str | None = None):
    """Fetch a remote logo on behalf of the browser, which cannot read it cross-origin."""
    if not url:
        raise HTTPException(400, "Missing logo url.")

    try:
        logo = await download_logo(url)
    except LogoFetchError as e:
        logger.warning(f"Logo proxy failed: {e}", extra={"logo_url": url})
        raise HTTPException(400, "Unable to load logo.") from e

    return Response(
        content=logo.data,
        media_type=logo.content_type,
        headers={"Cache-Control": LOGO_CACHE_CONTROL},
    )


@font_files_router.get("/{name}")
async def get_font_file(name: str):
    """Serve one font file from the font directory."""
    try:
        data = load_font_file(settings.fonts_dir, name)
    except FileNotFoundError as e:
        raise HTTPException(404, "Font not found") from e

    suffix = name[name.rfind(".") :].lower()
    media_type = FONT_MEDIA_TYPES.get(suffix, "application/octet-stream")
    return Response(content=data, media_type=media_type)
