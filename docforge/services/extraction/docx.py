"""DOCX (WordprocessingML) paragraph extraction."""

import logging

from lxml import etree

from docforge.services.archive import find_and_inflate
from docforge.utils import collapse_blank_lines

logger = logging.getLogger(__name__)

BULLET = "•"

W_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
_W_QUALIFIED = f"{{{W_NAMESPACE}}}"
# Recover mode keeps an undeclared prefix as part of the tag
_W_PREFIXED = "w:"


def _local_name(element) -> str:
    """
    WordprocessingML local name of an element, or "" for any other vocabulary.

    DrawingML (a:p, a:t) and math (m:t) elements share local names with
    WordprocessingML ones and must not be read as document text.
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    for prefix in (_W_QUALIFIED, _W_PREFIXED):
        if tag.startswith(prefix):
            return tag[len(prefix) :]
    return ""


class DocxExtractor:
    """Extract paragraph text from the main document part of a DOCX container."""

    DOCUMENT_PATH = "word/document.xml"

    # Run children that contribute whitespace
    RUN_BREAKS = {"tab": "\t", "br": "\n", "cr": "\n"}

    def __init__(self):
        self.parser = etree.XMLParser(
            recover=True,
            resolve_entities=False,
            no_network=True,
        )

    def extract(self, content: bytes) -> str:
        """
        Extract plain text from a DOCX file.

        Args:
            content: Raw bytes of the .docx container

        Returns:
            Paragraphs separated by blank lines; numbered/bulleted paragraphs
            are prefixed with a bullet glyph

        Raises:
            ArchiveFormatError: If the container is malformed
        """
        xml = find_and_inflate(content, self.DOCUMENT_PATH)
        paragraphs = self._extract_paragraphs(xml)
        logger.debug(f"Extracted {len(paragraphs)} paragraphs from {self.DOCUMENT_PATH}")
        return collapse_blank_lines("\n\n".join(paragraphs)).strip()

    def _extract_paragraphs(self, xml: bytes) -> list[str]:
        """Return the non-empty text of every w:p element in document order."""
        try:
            root = etree.fromstring(xml, self.parser)
        except etree.XMLSyntaxError as e:
            logger.warning(f"Unreadable {self.DOCUMENT_PATH}, treating as empty: {e}")
            return []
        if root is None:
            return []

        paragraphs: list[str] = []
        for element in root.iter():
            if _local_name(element) != "p":
                continue

            text = self._paragraph_text(element)
            if not text:
                continue

            if self._is_list_item(element):
                text = f"{BULLET} {text}"
            paragraphs.append(text)

        return paragraphs

    def _paragraph_text(self, paragraph) -> str:
        """Concatenate run text that belongs directly to this paragraph."""
        parts: list[str] = []
        for element in paragraph.iter():
            if self._owning_paragraph(element) is not paragraph:
                continue

            name = _local_name(element)
            if name == "t":
                parts.append(element.text or "")
            elif name in self.RUN_BREAKS and _local_name(element.getparent()) == "r":
                parts.append(self.RUN_BREAKS[name])
        return "".join(parts).strip()

    def _owning_paragraph(self, element):
        """Nearest enclosing w:p (text boxes nest paragraphs inside paragraphs)."""
        for ancestor in element.iterancestors():
            if _local_name(ancestor) == "p":
                return ancestor
        return None

    def _is_list_item(self, paragraph) -> bool:
        for element in paragraph.iter():
            if _local_name(element) == "numPr" and self._owning_paragraph(element) is paragraph:
                return True
        return False
