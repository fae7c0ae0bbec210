"""Unified extraction service for multiple document types."""

import logging

from docforge.exceptions import UnsupportedFormatError
from docforge.services.extraction.docx import DocxExtractor
from docforge.services.extraction.html import HtmlExtractor
from docforge.services.extraction.plain_text import PlainTextExtractor
from docforge.services.extraction.rtf import RtfExtractor
from docforge.utils import get_extension

logger = logging.getLogger(__name__)


class ExtractionService:
    """Unified text extraction service, dispatched by file extension."""

    UNSUPPORTED_MESSAGE = "Preview is available for DOCX, TXT, RTF, and HTML files."

    def __init__(self):
        docx = DocxExtractor()
        plain_text = PlainTextExtractor()
        rtf = RtfExtractor()
        html = HtmlExtractor()
        self.extractors = {
            "docx": docx,
            "txt": plain_text,
            "rtf": rtf,
            "html": html,
            "htm": html,
        }

    @property
    def supported_extensions(self) -> set[str]:
        return set(self.extractors)

    def is_supported(self, file_name: str | None) -> bool:
        """Check if the file name has an extension we can extract."""
        return get_extension(file_name) in self.extractors

    def extract(self, content: bytes, file_name: str) -> str:
        """
        Extract plain text from an uploaded document.

        Args:
            content: Raw file bytes
            file_name: Declared file name, used only for extension dispatch

        Returns:
            Plain text with paragraphs separated by blank lines and list
            items starting with a bullet glyph

        Raises:
            UnsupportedFormatError: If the extension is not recognized
            ArchiveFormatError: If a DOCX container is malformed
        """
        extension = get_extension(file_name)
        extractor = self.extractors.get(extension)
        if extractor is None:
            raise UnsupportedFormatError(self.UNSUPPORTED_MESSAGE)

        text = extractor.extract(content)
        logger.info(
            f"Extracted {len(text)} characters from {extension} upload",
            extra={"extension": extension, "input_bytes": len(content)},
        )
        return text
