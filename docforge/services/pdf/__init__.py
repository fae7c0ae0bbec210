"""From-scratch PDF 1.4 synthesis: styles, wrapping, pagination, serialization."""

from docforge.services.pdf.builder import PdfAssets, PdfBuilder, build
from docforge.services.pdf.images import LogoAsset, load_image
from docforge.services.pdf.styles import LayoutConfig, ResolvedLineStyle, StyleConfig, resolve_style
from docforge.services.pdf.writer import PdfWriter

__all__ = [
    "LayoutConfig",
    "LogoAsset",
    "PdfAssets",
    "PdfBuilder",
    "PdfWriter",
    "ResolvedLineStyle",
    "StyleConfig",
    "build",
    "load_image",
    "resolve_style",
]
