"""Paragraph to role classification."""

import logging
import re

from docforge.enums import BlockRole
from docforge.services.layout.models import PLACEHOLDER_BLOCK, TextBlock
from docforge.services.layout.rules import LayoutRule, default_rules
from docforge.utils import collapse_blank_lines

logger = logging.getLogger(__name__)

NUMBERED_HEADING = re.compile(r"^\d+[.)]\s+")
TITLE_CASE_HEADING = re.compile(r"^[A-Z][A-Za-z0-9'’&:,()\-\s]+$")
HAS_UPPERCASE = re.compile(r"[A-Z]")
PARAGRAPH_BREAK = re.compile(r"\n\n+")

MAX_UPPERCASE_HEADING_LENGTH = 72
MAX_TITLE_CASE_HEADING_LENGTH = 68


def sanitize_text(text: str) -> str:
    """Normalize line endings and non-breaking spaces, collapse blank-line runs."""
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\u00a0", " ")
    return collapse_blank_lines(text).strip()


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines, trimming and discarding empty paragraphs."""
    paragraphs = (paragraph.strip() for paragraph in PARAGRAPH_BREAK.split(sanitize_text(text)))
    return [paragraph for paragraph in paragraphs if paragraph]


def is_heading(paragraph: str) -> bool:
    """Numbered, all-caps, or short title-case paragraphs read as headings."""
    if NUMBERED_HEADING.match(paragraph):
        return True

    if (
        paragraph == paragraph.upper()
        and HAS_UPPERCASE.search(paragraph)
        and len(paragraph) <= MAX_UPPERCASE_HEADING_LENGTH
    ):
        return True

    return (
        TITLE_CASE_HEADING.match(paragraph) is not None
        and len(paragraph) <= MAX_TITLE_CASE_HEADING_LENGTH
        and not paragraph.endswith(".")
    )


def infer_role(paragraph: str, index: int) -> BlockRole:
    if index == 0:
        return BlockRole.TITLE
    return BlockRole.HEADING if is_heading(paragraph) else BlockRole.BODY


def classify(text: str, rules: list[LayoutRule] | None = None) -> list[TextBlock]:
    """
    Split text into paragraphs and tag each with a presentation role.

    Args:
        text: Extracted plain text, paragraphs separated by blank lines
        rules: House-style rules to apply after generic classification.
            None uses the configured defaults; an empty list disables them.

    Returns:
        Blocks in reading order; never empty (a lone ' ' body block stands in
        for a blank document)
    """
    paragraphs = split_paragraphs(text)
    blocks = [
        TextBlock(role=infer_role(paragraph, index), text=paragraph)
        for index, paragraph in enumerate(paragraphs)
    ]

    if not blocks:
        return [PLACEHOLDER_BLOCK]

    for rule in default_rules() if rules is None else rules:
        blocks = rule.apply(blocks)

    logger.debug(f"Classified {len(paragraphs)} paragraphs into {len(blocks)} blocks")
    return blocks or [PLACEHOLDER_BLOCK]
