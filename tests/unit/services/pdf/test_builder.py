"""Tests for paginated PDF synthesis."""

import io
import re

from PIL import Image

from docforge.enums import BlockRole
from docforge.services.layout import TextBlock
from docforge.services.pdf import LayoutConfig, LogoAsset, PdfAssets, PdfBuilder, StyleConfig, build
from pdf_helpers import assert_valid_xref

PAGE_COUNT = re.compile(rb"/Type /Pages /Count (\d+)")

PARAGRAPH = (
    "This paragraph is long enough to wrap across several lines of the text column, "
    "which lets the tests exercise both block-level and line-level page breaks."
)


def page_count(pdf: bytes) -> int:
    return int(PAGE_COUNT.search(pdf).group(1))


def long_document(paragraphs: int = 60) -> list[TextBlock]:
    blocks = [TextBlock(role=BlockRole.TITLE, text="Annual Report")]
    for index in range(paragraphs):
        if index % 10 == 0:
            blocks.append(TextBlock(role=BlockRole.HEADING, text=f"Section {index // 10 + 1}"))
        blocks.append(TextBlock(role=BlockRole.BODY, text=PARAGRAPH))
    return blocks


def png_logo() -> LogoAsset:
    buffer = io.BytesIO()
    Image.new("RGB", (270, 90), (20, 40, 60)).save(buffer, format="PNG")
    return LogoAsset(data=buffer.getvalue())


class TestBuild:
    """Tests for whole-document output."""

    def test_single_page_document(self):
        """A short document is one well-formed page."""
        pdf = build([TextBlock(role=BlockRole.TITLE, text="Hello")])

        assert pdf.startswith(b"%PDF-1.4\n")
        assert pdf.endswith(b"%%EOF\n")
        assert page_count(pdf) == 1
        assert b"(Hello) Tj" in pdf
        assert b"/MediaBox [0 0 612 792]" in pdf
        assert_valid_xref(pdf)

    def test_multi_page_document(self):
        """Long documents flow onto several pages with exact xref offsets."""
        pdf = build(long_document())

        pages = page_count(pdf)
        assert pages > 1
        assert pdf.count(b"/Type /Page /Parent") == pages
        assert f"(Page {pages} of {pages}) Tj".encode() in pdf
        assert_valid_xref(pdf)

    def test_empty_document_has_one_page(self):
        """No blocks still produces a single page with a placeholder line."""
        pdf = build([])

        assert page_count(pdf) == 1
        assert b"( ) Tj" in pdf
        assert_valid_xref(pdf)

    def test_blank_blocks_are_skipped(self):
        """Whitespace-only blocks render nothing."""
        pdf = build(
            [
                TextBlock(role=BlockRole.BODY, text="   "),
                TextBlock(role=BlockRole.BODY, text="Visible"),
            ]
        )

        assert page_count(pdf) == 1
        assert b"(Visible) Tj" in pdf

    def test_fonts_are_winansi_type1(self):
        """Both faces are referenced by name with WinAnsiEncoding."""
        pdf = build([TextBlock(role=BlockRole.BODY, text="x")])

        assert b"/BaseFont /Helvetica /Encoding /WinAnsiEncoding" in pdf
        assert b"/BaseFont /Helvetica-Bold /Encoding /WinAnsiEncoding" in pdf

    def test_accent_rail_on_every_page(self):
        """Every page draws the red rail down its left edge."""
        pdf = build(long_document())

        assert pdf.count(b"0.83 0.12 0.18 rg 0 0 22 792 re f") == page_count(pdf)

    def test_style_changes_font_size(self):
        """The font scale flows into the text operators."""
        blocks = [TextBlock(role=BlockRole.TITLE, text="Scaled")]

        pdf = build(blocks, StyleConfig(font_scale=100))

        assert b"/F1 29 Tf" in pdf

    def test_bold_title(self):
        """A bold title is set in the bold face."""
        blocks = [TextBlock(role=BlockRole.TITLE, text="Bold")]

        pdf = build(blocks, StyleConfig(title_font_weight="bold"))

        assert re.search(rb"/F2 [\d.]+ Tf [\d.]+ [\d.]+ Td \(Bold\) Tj", pdf)


class TestDecorations:
    """Tests for logo, first-page label and footers."""

    def test_footers_and_page_numbers(self):
        """Footer lines and 'Page N of T' appear on every page."""
        assets = PdfAssets(footer_main="Main footer", footer_sub="Sub footer")

        pdf = build(long_document(), assets=assets)

        pages = page_count(pdf)
        assert pdf.count(b"(Main footer) Tj") == pages
        assert pdf.count(b"(Sub footer) Tj") == pages
        assert b"(Page 1 of " in pdf

    def test_label_only_on_first_page(self):
        """The confidentiality label is drawn once, one line per text line."""
        assets = PdfAssets(confidential_text="Restricted\nVersion 2")

        pdf = build(long_document(), assets=assets)

        assert page_count(pdf) > 1
        assert pdf.count(b"(Restricted) Tj") == 1
        assert pdf.count(b"(Version 2) Tj") == 1

    def test_tabs_are_expanded_to_spaces(self):
        """Tabs become spaces before text is measured and drawn."""
        assets = PdfAssets(footer_main="Name\tValue", confidential_text="Ref\t42")

        pdf = build([TextBlock(role=BlockRole.BODY, text="Cost\t10")], assets=assets)

        assert b"\\011" not in pdf
        assert b"(Name    Value) Tj" in pdf
        assert b"(Ref 42) Tj" in pdf
        assert b"(Cost 10) Tj" in pdf

    def test_logo_embedded(self):
        """A decodable logo is embedded once and drawn on every page."""
        pdf = build(long_document(), assets=PdfAssets(logo=png_logo()))

        assert pdf.count(b"/Subtype /Image") == 1
        assert b"/XObject << /Im1" in pdf
        assert pdf.count(b"/Im1 Do") == page_count(pdf)
        assert b"q 135 0 0 45 54 707 cm" in pdf
        assert_valid_xref(pdf)

    def test_undecodable_logo_omitted(self):
        """A logo that cannot be decoded is left out without failing."""
        pdf = build(
            [TextBlock(role=BlockRole.BODY, text="x")],
            assets=PdfAssets(logo=LogoAsset(data=b"not an image")),
        )

        assert b"/XObject" not in pdf
        assert b"/Im1 Do" not in pdf
        assert_valid_xref(pdf)


class TestPagination:
    """Tests for the page-filling invariants."""

    def test_lines_stay_above_bottom_margin(self):
        """No placed line extends past the bottom margin."""
        builder = PdfBuilder()
        prepared = builder._prepare_blocks(long_document(), StyleConfig())

        pages = builder._paginate(prepared)

        assert len(pages) > 1
        bottom = builder.layout.content_bottom
        for page in pages:
            assert page.lines
            for placed in page.lines:
                assert placed.baseline + placed.style.line_height <= bottom

    def test_pages_start_at_content_top(self):
        """Each page's first line starts at the top of the content area."""
        builder = PdfBuilder()
        prepared = builder._prepare_blocks(long_document(), StyleConfig())

        pages = builder._paginate(prepared)

        assert all(page.lines[0].baseline >= builder.layout.content_top for page in pages)

    def test_oversized_block_splits_mid_block(self):
        """A block taller than a page continues on the next page."""
        builder = PdfBuilder()
        blocks = [TextBlock(role=BlockRole.BODY, text=" ".join([PARAGRAPH] * 40))]

        pages = builder._paginate(builder._prepare_blocks(blocks, StyleConfig()))

        assert len(pages) > 1

    def test_custom_layout(self):
        """Page geometry comes from the layout configuration."""
        layout = LayoutConfig(page_width=595, page_height=842)

        pdf = PdfBuilder(layout).build([TextBlock(role=BlockRole.BODY, text="A4")])

        assert b"/MediaBox [0 0 595 842]" in pdf
