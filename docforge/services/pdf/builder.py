"""Paginated PDF synthesis from classified text blocks."""

import logging
from dataclasses import dataclass, field

from docforge.enums import Alignment, BlockRole
from docforge.services.layout.models import TextBlock
from docforge.services.pdf.images import LogoAsset, PdfImage, load_image
from docforge.services.pdf.metrics import FONT_FACES, HELVETICA, HELVETICA_ASCENT, FontFace
from docforge.services.pdf.styles import (
    WEIGHT_FACES,
    LayoutConfig,
    ResolvedLineStyle,
    StyleConfig,
    resolve_style,
    scaled_size,
)
from docforge.services.pdf.wrapping import Line, wrap_block
from docforge.services.pdf.writer import PdfWriter, format_color, format_number, pdf_string

logger = logging.getLogger(__name__)

LOGO_RESOURCE = "Im1"

# WinAnsi Helvetica has no tab glyph
TAB_SIZE = 4


@dataclass(frozen=True)
class PdfAssets:
    """Per-document decorations drawn on every page independently of the content."""

    logo: LogoAsset | None = None
    footer_main: str = ""
    footer_sub: str = ""
    confidential_text: str = ""


@dataclass(frozen=True)
class PlacedLine:
    """A wrapped line with its baseline position, measured down from the page top."""

    line: Line
    baseline: float
    style: ResolvedLineStyle


@dataclass
class Page:
    lines: list[PlacedLine] = field(default_factory=list)


class PdfBuilder:
    """Lay out text blocks across letter pages and serialize a PDF."""

    def __init__(self, layout: LayoutConfig | None = None):
        self.layout = layout or LayoutConfig()

    def build(
        self,
        blocks: list[TextBlock],
        style: StyleConfig | None = None,
        assets: PdfAssets | None = None,
    ) -> bytes:
        """
        Synthesize a complete PDF document.

        Args:
            blocks: Role-tagged blocks in reading order
            style: Typography settings (defaults when None)
            assets: Logo and footer decorations (none when None)

        Returns:
            PDF file bytes
        """
        style = style or StyleConfig()
        assets = assets or PdfAssets()

        prepared = self._prepare_blocks(blocks, style)
        pages = self._paginate(prepared)
        if not pages:
            pages = [self._empty_page(style)]

        image = load_image(assets.logo) if assets.logo else None

        writer = PdfWriter()
        font_ids = {face.resource: writer.add(self._font_object(face)) for face in FONT_FACES}
        image_id = writer.add_stream(image.stream, image.dictionary) if image else None
        pages_id = writer.reserve()

        resources = self._resources(font_ids, image_id)
        page_ids: list[int] = []
        for index, page in enumerate(pages):
            stream = self._render_page(page, index, len(pages), style, assets, image)
            content_id = writer.add_stream(stream)
            page_ids.append(
                writer.add(
                    f"<< /Type /Page /Parent {pages_id} 0 R "
                    f"/MediaBox [0 0 {format_number(self.layout.page_width)} "
                    f"{format_number(self.layout.page_height)}] "
                    f"/Resources {resources} /Contents {content_id} 0 R >>"
                )
            )

        kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
        writer.fill(pages_id, f"<< /Type /Pages /Count {len(page_ids)} /Kids [{kids}] >>")
        catalog_id = writer.add(f"<< /Type /Catalog /Pages {pages_id} 0 R >>")

        pdf = writer.serialize(root_id=catalog_id)
        logger.info(
            f"Built PDF with {len(pages)} pages from {len(blocks)} blocks",
            extra={"pages": len(pages), "objects": len(writer), "bytes": len(pdf)},
        )
        return pdf

    def _prepare_blocks(
        self, blocks: list[TextBlock], style: StyleConfig
    ) -> list[tuple[ResolvedLineStyle, list[Line]]]:
        """Resolve styles and wrap text; blocks with blank text are dropped."""
        prepared = []
        for index, block in enumerate(blocks):
            text = block.text.expandtabs(TAB_SIZE).strip()
            if not text:
                continue

            previous_role = blocks[index - 1].role if index > 0 else None
            next_role = blocks[index + 1].role if index + 1 < len(blocks) else None
            resolved = resolve_style(block.role, style, self.layout, previous_role, next_role)
            lines = wrap_block(
                text,
                resolved.face,
                resolved.font_size,
                resolved.max_width,
                self.layout.min_list_column,
            )
            prepared.append((resolved, lines))
        return prepared

    def _paginate(self, prepared: list[tuple[ResolvedLineStyle, list[Line]]]) -> list[Page]:
        """
        Flow blocks down the pages.

        A block that does not fit in the remaining space starts a new page
        (unless the page is still empty). Once a block has started, a line
        that would cross the bottom margin continues on the next page.
        """
        top = self.layout.content_top
        bottom = self.layout.content_bottom

        pages: list[Page] = []
        current = Page()
        y = top

        for resolved, lines in prepared:
            block_height = (
                resolved.spacing_before
                + len(lines) * resolved.line_height
                + resolved.spacing_after
            )
            if y + block_height > bottom and current.lines:
                pages.append(current)
                current = Page()
                y = top

            y += resolved.spacing_before
            for line in lines:
                if y + resolved.line_height > bottom and current.lines:
                    pages.append(current)
                    current = Page()
                    y = top
                current.lines.append(PlacedLine(line=line, baseline=y, style=resolved))
                y += resolved.line_height
            y += resolved.spacing_after

        if current.lines:
            pages.append(current)
        return pages

    def _empty_page(self, style: StyleConfig) -> Page:
        """The single page emitted for a document with no visible text."""
        resolved = resolve_style(BlockRole.BODY, style, self.layout)
        placeholder = PlacedLine(line=Line(" "), baseline=self.layout.content_top, style=resolved)
        return Page(lines=[placeholder])

    def _font_object(self, face: FontFace) -> str:
        return (
            f"<< /Type /Font /Subtype /Type1 /BaseFont /{face.base_font} "
            "/Encoding /WinAnsiEncoding >>"
        )

    def _resources(self, font_ids: dict[str, int], image_id: int | None) -> str:
        fonts = " ".join(f"/{name} {object_id} 0 R" for name, object_id in font_ids.items())
        resources = f"/Font << {fonts} >>"
        if image_id is not None:
            resources += f" /XObject << /{LOGO_RESOURCE} {image_id} 0 R >>"
        return f"<< {resources} >>"

    def _text_op(
        self,
        text: str,
        face: FontFace,
        size: float,
        x: float,
        baseline: float,
        color: tuple[int, int, int],
    ) -> bytes:
        y = self.layout.page_height - baseline
        return (
            f"{format_color(color)} rg BT /{face.resource} {format_number(size)} Tf "
            f"{format_number(x)} {format_number(y)} Td ".encode("latin-1")
            + pdf_string(text)
            + b" Tj ET"
        )

    def _aligned_x(
        self, text: str, face: FontFace, size: float, align: Alignment, anchor: float
    ) -> float:
        if align == Alignment.CENTER:
            return anchor - face.text_width(text, size) / 2
        if align == Alignment.RIGHT:
            return anchor - face.text_width(text, size)
        return anchor

    def _render_page(
        self,
        page: Page,
        index: int,
        total: int,
        style: StyleConfig,
        assets: PdfAssets,
        image: PdfImage | None,
    ) -> bytes:
        """Build one page's content stream: decorations, body lines, footer."""
        layout = self.layout
        ops: list[bytes] = []

        ops.append(
            f"{format_color(layout.rail_color)} rg 0 0 {format_number(layout.rail_width)} "
            f"{format_number(layout.page_height)} re f".encode("latin-1")
        )

        if image is not None:
            height = layout.logo_width * image.aspect_ratio
            bottom = layout.page_height - layout.logo_y - height
            ops.append(
                f"q {format_number(layout.logo_width)} 0 0 {format_number(height)} "
                f"{format_number(layout.logo_x)} {format_number(bottom)} cm "
                f"/{LOGO_RESOURCE} Do Q".encode("latin-1")
            )

        label = assets.confidential_text.strip()
        if index == 0 and label:
            ops.extend(self._label_ops(label, style))

        for placed in page.lines:
            resolved = placed.style
            text = placed.line.text
            if not text:
                continue
            if resolved.align == Alignment.CENTER:
                x = self._aligned_x(
                    text, resolved.face, resolved.font_size, Alignment.CENTER, layout.page_width / 2
                )
            else:
                x = layout.text_left + placed.line.indent
            ops.append(
                self._text_op(
                    text, resolved.face, resolved.font_size, x, placed.baseline, layout.text_color
                )
            )

        ops.extend(self._footer_ops(index, total, style, assets))
        return b"\n".join(ops)

    def _label_ops(self, label: str, style: StyleConfig) -> list[bytes]:
        """Right-aligned notice in the top-right corner of the first page."""
        layout = self.layout
        face = WEIGHT_FACES[style.body_font_weight]
        size = scaled_size(style.body_font_size, style, layout)
        anchor = layout.page_width - layout.label_right_inset
        first_baseline = layout.label_top + size * HELVETICA_ASCENT

        ops = []
        for line_index, line in enumerate(label.expandtabs(TAB_SIZE).split("\n")):
            line = line.strip()
            if not line:
                continue
            baseline = first_baseline + line_index * size * layout.label_line_factor
            x = self._aligned_x(line, face, size, Alignment.RIGHT, anchor)
            ops.append(self._text_op(line, face, size, x, baseline, layout.label_color))
        return ops

    def _footer_ops(
        self, index: int, total: int, style: StyleConfig, assets: PdfAssets
    ) -> list[bytes]:
        layout = self.layout
        face = HELVETICA
        size = scaled_size(layout.footer_font_size, style, layout)
        first = layout.footer_y
        second = layout.footer_y + layout.footer_line_gap
        left = layout.footer_inset
        right = layout.page_width - layout.footer_inset

        ops = []
        for text, baseline in ((assets.footer_main, first), (assets.footer_sub, second)):
            text = text.expandtabs(TAB_SIZE).strip()
            if text:
                ops.append(self._text_op(text, face, size, left, baseline, layout.text_color))

        page_label = f"Page {index + 1} of {total}"
        x = self._aligned_x(page_label, face, size, Alignment.RIGHT, right)
        ops.append(self._text_op(page_label, face, size, x, second, layout.text_color))
        return ops


def build(
    blocks: list[TextBlock],
    style_config: StyleConfig | None = None,
    assets: PdfAssets | None = None,
    layout: LayoutConfig | None = None,
) -> bytes:
    """Synthesize a PDF from blocks with a fresh builder."""
    return PdfBuilder(layout).build(blocks, style_config, assets)
