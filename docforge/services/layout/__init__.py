"""Layout classification of extracted text into role-tagged blocks."""

from docforge.services.layout.classifier import classify, sanitize_text, split_paragraphs
from docforge.services.layout.models import (
    PLACEHOLDER_BLOCK,
    TextBlock,
    blocks_from_json,
    blocks_to_json,
)
from docforge.services.layout.rules import (
    BrandMergeRule,
    CenteredNoticeRule,
    LayoutRule,
    default_rules,
)

__all__ = [
    "BrandMergeRule",
    "CenteredNoticeRule",
    "LayoutRule",
    "PLACEHOLDER_BLOCK",
    "TextBlock",
    "blocks_from_json",
    "blocks_to_json",
    "classify",
    "default_rules",
    "sanitize_text",
    "split_paragraphs",
]
