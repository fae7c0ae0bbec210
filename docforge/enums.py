"""Enums for role and style values used throughout the application."""

from enum import StrEnum


class BlockRole(StrEnum):
    """Presentation role of a text block."""

    TITLE = "title"
    HEADING = "heading"
    BODY = "body"
    CENTERED_BODY = "centeredBody"


class FontWeight(StrEnum):
    """Font weight selectable per role."""

    NORMAL = "normal"
    LIGHT = "light"
    BOLD = "bold"


class Alignment(StrEnum):
    """Horizontal alignment of a rendered line."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
