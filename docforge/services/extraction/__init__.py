"""Document extraction services."""

from docforge.services.extraction.docx import DocxExtractor
from docforge.services.extraction.html import HtmlExtractor
from docforge.services.extraction.plain_text import PlainTextExtractor
from docforge.services.extraction.rtf import RtfExtractor
from docforge.services.extraction.service import ExtractionService

__all__ = [
    "DocxExtractor",
    "ExtractionService",
    "HtmlExtractor",
    "PlainTextExtractor",
    "RtfExtractor",
]
