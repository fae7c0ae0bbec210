"""Conversion pipeline: upload bytes to role-tagged blocks to PDF bytes."""

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial

from docforge.exceptions import UnsupportedFormatError
from docforge.services.extraction import ExtractionService
from docforge.services.layout import TextBlock, classify
from docforge.services.layout.rules import LayoutRule
from docforge.services.pdf import PdfAssets, PdfBuilder, StyleConfig
from docforge.services.rewrite import TextRewriter, rewrite_text
from docforge.utils import decode_base64_payload, get_extension, safe_output_name

logger = logging.getLogger(__name__)

PDF_EXTENSION = "pdf"

__all__ = [
    "ConversionPipeline",
    "ConversionResult",
    "decode_upload",
    "extract_blocks",
    "get_extension",
    "safe_output_name",
]


def decode_upload(data: str) -> bytes:
    """Decode the base64 payload of an uploaded file."""
    return decode_base64_payload(data)


def extract_blocks(
    file_name: str,
    content: bytes,
    rules: list[LayoutRule] | None = None,
    extraction_service: ExtractionService | None = None,
) -> list[TextBlock]:
    """
    Extract and classify an upload without synthesizing a PDF.

    Raises:
        UnsupportedFormatError: If the extension is not recognized
        ArchiveFormatError: If a DOCX container is malformed
    """
    service = extraction_service or ExtractionService()
    return classify(service.extract(content, file_name), rules)


@dataclass(frozen=True)
class ConversionResult:
    pdf: bytes
    filename: str
    blocks: list[TextBlock] = field(default_factory=list)


class ConversionPipeline:
    """Runs extraction, classification, optional rewriting and PDF synthesis in order."""

    UNSUPPORTED_MESSAGE = "Unsupported file type. Upload PDF, DOCX, TXT, RTF, or HTML."

    def __init__(
        self,
        extraction_service: ExtractionService | None = None,
        builder: PdfBuilder | None = None,
        rewriter: TextRewriter | None = None,
        rules: list[LayoutRule] | None = None,
    ):
        self.extraction_service = extraction_service or ExtractionService()
        self.builder = builder or PdfBuilder()
        self.rewriter = rewriter
        self.rules = rules

    def is_supported(self, file_name: str | None) -> bool:
        return (
            get_extension(file_name) == PDF_EXTENSION
            or self.extraction_service.is_supported(file_name)
        )

    def synthesize(
        self,
        blocks: list[TextBlock],
        style: StyleConfig | None = None,
        assets: PdfAssets | None = None,
    ) -> bytes:
        """Synthesize a PDF from already classified blocks."""
        return self.builder.build(blocks, style, assets)

    async def convert(
        self,
        file_name: str,
        content: bytes,
        style: StyleConfig | None = None,
        assets: PdfAssets | None = None,
        rewrite: bool = False,
        output_name: str | None = None,
    ) -> ConversionResult:
        """
        Convert an uploaded document to a styled PDF.

        A .pdf upload is returned unchanged. Extraction errors abort the
        conversion before anything is synthesized.

        Args:
            file_name: Declared upload name, used for extension dispatch
            content: Raw upload bytes
            style: Typography settings (defaults when None)
            assets: Logo and footer decorations
            rewrite: Run the extracted text through the rewriter first
            output_name: Preferred download name (the upload name when None)

        Returns:
            ConversionResult with the PDF bytes, the download file name, and
            the blocks that were laid out (empty for a passthrough)

        Raises:
            UnsupportedFormatError: If the extension is not recognized
            ArchiveFormatError: If a DOCX container is malformed
        """
        if not self.is_supported(file_name):
            raise UnsupportedFormatError(self.UNSUPPORTED_MESSAGE)

        filename = f"{safe_output_name(output_name or file_name)}.pdf"

        if get_extension(file_name) == PDF_EXTENSION:
            logger.info(f"Passing through PDF upload {file_name}", extra={"bytes": len(content)})
            return ConversionResult(pdf=content, filename=filename)

        # Run blocking parse and layout in thread pool
        loop = asyncio.get_event_loop()
        text = await loop.run_in_executor(
            None, partial(self.extraction_service.extract, content, file_name)
        )
        if rewrite:
            text = await rewrite_text(text, file_name, self.rewriter)

        blocks = await loop.run_in_executor(None, partial(classify, text, self.rules))
        pdf = await loop.run_in_executor(None, partial(self.synthesize, blocks, style, assets))

        logger.info(
            f"Converted {file_name} to {filename}",
            extra={"blocks": len(blocks), "input_bytes": len(content), "output_bytes": len(pdf)},
        )
        return ConversionResult(pdf=pdf, filename=filename, blocks=blocks)
