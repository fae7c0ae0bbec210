"""Document preview and PDF generation endpoints."""

import asyncio
import logging
from functools import partial

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from docforge.config import settings
from docforge.enums import BlockRole
from docforge.exceptions import ConversionError
from docforge.middleware.rate_limit import rate_limit_convert
from docforge.services.assets import fetch_logo
from docforge.services.layout import TextBlock
from docforge.services.pdf import PdfAssets, StyleConfig
from docforge.services.pipeline import (
    ConversionPipeline,
    decode_upload,
    extract_blocks,
    safe_output_name,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadedFile(CamelModel):
    name: str
    data: str  # base64, optionally as a data: URL


class BlockPayload(CamelModel):
    role: BlockRole
    text: str


class CodedDocument(CamelModel):
    blocks: list[BlockPayload]


class ExtractDocumentRequest(CamelModel):
    uploaded_file: UploadedFile | None = None


class ExtractDocumentResponse(CamelModel):
    coded_document: CodedDocument


class GeneratePdfRequest(CamelModel):
    file_name: str | None = None
    uploaded_file: UploadedFile | None = None
    blocks: list[BlockPayload] | None = None
    style_options: StyleConfig | None = None
    footer_main: str | None = None
    footer_sub: str | None = None
    confidential_text: str | None = None
    logo_url: str | None = None
    rewrite: bool | None = None


def _decode(uploaded_file: UploadedFile) -> bytes:
    try:
        return decode_upload(uploaded_file.data)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e


def _default(value: str | None, fallback: str) -> str:
    return fallback if value is None else value


async def _build_assets(body: GeneratePdfRequest) -> PdfAssets:
    """Resolve decorations from the request, falling back to the configured house style."""
    logo_url = _default(body.logo_url, settings.default_logo_url)
    return PdfAssets(
        logo=await fetch_logo(logo_url),
        footer_main=_default(body.footer_main, settings.footer_main),
        footer_sub=_default(body.footer_sub, settings.footer_sub),
        confidential_text=_default(body.confidential_text, settings.confidential_text),
    )


@router.post("/extract-document", response_model=ExtractDocumentResponse)
@rate_limit_convert()
async def extract_document(request: Request, response: Response, body: ExtractDocumentRequest):
    """Extract an upload into role-tagged blocks for the live preview."""
    uploaded = body.uploaded_file
    if uploaded is None or not uploaded.name or not uploaded.data:
        raise HTTPException(400, "Please upload a file to preview.")

    content = _decode(uploaded)

    try:
        # Run blocking extraction in thread pool
        loop = asyncio.get_event_loop()
        blocks = await loop.run_in_executor(None, partial(extract_blocks, uploaded.name, content))
    except ConversionError:
        raise
    except Exception as e:
        logger.exception(f"Preview extraction failed for {uploaded.name}")
        raise HTTPException(500, "Unable to build preview.") from e

    return ExtractDocumentResponse(
        coded_document=CodedDocument(
            blocks=[BlockPayload(role=block.role, text=block.text) for block in blocks]
        )
    )


@router.post("/generate-pdf")
@rate_limit_convert()
async def generate_pdf(request: Request, body: GeneratePdfRequest):
    """
    Generate a styled PDF download.

    Edited preview blocks are laid out directly when given; otherwise the
    upload goes through the full conversion pipeline.
    """
    uploaded = body.uploaded_file
    has_upload = uploaded is not None and bool(uploaded.name) and bool(uploaded.data)
    if body.blocks is None and not has_upload:
        raise HTTPException(400, "Please upload a file to convert.")

    content = _decode(uploaded) if body.blocks is None else b""
    pipeline = ConversionPipeline()
    rewrite = settings.rewrite_enabled if body.rewrite is None else body.rewrite

    try:
        assets = await _build_assets(body)
        if body.blocks is not None:
            blocks = [TextBlock(role=block.role, text=block.text) for block in body.blocks]
            source_name = body.file_name or (uploaded.name if uploaded else None)
            loop = asyncio.get_event_loop()
            pdf = await loop.run_in_executor(
                None, partial(pipeline.synthesize, blocks, body.style_options, assets)
            )
            filename = f"{safe_output_name(source_name)}.pdf"
        else:
            result = await pipeline.convert(
                uploaded.name,
                content,
                style=body.style_options,
                assets=assets,
                rewrite=rewrite,
                output_name=body.file_name,
            )
            pdf, filename = result.pdf, result.filename
    except ConversionError:
        raise
    except Exception as e:
        logger.exception("PDF generation failed")
        raise HTTPException(500, "Unable to generate PDF.") from e

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
