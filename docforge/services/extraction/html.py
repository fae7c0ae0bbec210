"""HTML text extraction."""

import re

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from docforge.utils import collapse_blank_lines

BULLET = "•"

_HORIZONTAL_WHITESPACE = re.compile(r"[ \t\f\v\r]+")
_SPACES_AROUND_NEWLINE = re.compile(r" *\n *")
_SOURCE_WHITESPACE = re.compile(r"\s+")


class HtmlExtractor:
    """Extract paragraph-structured plain text from an HTML document."""

    HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
    DROPPED_TAGS = {"style", "script", "noscript", "template"}
    BLOCK_TAGS = {"p", "div", "section", "article", "ul", "ol", "title"}
    INLINE_TAGS = {
        "a",
        "abbr",
        "b",
        "code",
        "em",
        "font",
        "i",
        "mark",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "u",
    }
    SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

    def extract(self, content: bytes) -> str:
        return self.to_text(content.decode("utf-8", errors="replace"))

    def to_text(self, html_content: str) -> str:
        """
        Convert HTML to plain text with paragraph boundaries as blank lines.

        Args:
            html_content: HTML string

        Returns:
            Text where headings and block elements are separated by blank lines,
            list items start on a new line with a bullet glyph and <br> is a
            single newline
        """
        soup = BeautifulSoup(html_content, "lxml")

        parts: list[str] = []
        self._render(soup, parts)

        text = "".join(parts).replace("\u00a0", " ")
        text = _HORIZONTAL_WHITESPACE.sub(" ", text)
        text = _SPACES_AROUND_NEWLINE.sub("\n", text)
        return collapse_blank_lines(text).strip()

    def _render(self, node: Tag, parts: list[str]) -> None:
        """Append the text of node's children, mapping tags to whitespace."""
        for child in node.children:
            if isinstance(child, self.SKIPPED_STRINGS):
                continue

            if isinstance(child, NavigableString):
                parts.append(_SOURCE_WHITESPACE.sub(" ", str(child)))
                continue

            if not isinstance(child, Tag):
                continue

            tag_name = child.name.lower() if child.name else ""

            if tag_name in self.DROPPED_TAGS:
                continue

            if tag_name == "br":
                parts.append("\n")
            elif tag_name in self.HEADING_TAGS:
                parts.append("\n\n")
                self._render(child, parts)
                parts.append("\n\n")
            elif tag_name == "li":
                parts.append(f"\n{BULLET} ")
                self._render(child, parts)
                parts.append(" ")
            elif tag_name in self.BLOCK_TAGS:
                self._render(child, parts)
                parts.append("\n\n")
            elif tag_name in self.INLINE_TAGS:
                self._render(child, parts)
            else:
                parts.append(" ")
                self._render(child, parts)
                parts.append(" ")
