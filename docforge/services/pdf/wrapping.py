"""Greedy line wrapping by measured text width."""

import re
from dataclasses import dataclass

from docforge.services.pdf.metrics import FontFace

LIST_MARKER = re.compile(r"^([•\-\*]|\d+[.)])\s+(.*)$")
INLINE_ENUMERATION = re.compile(r"(?:^|\s)(\d+[.)])\s+")
INLINE_BULLET = re.compile(r"\s*•\s*")
LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class Line:
    """One rendered line; indent shifts left-aligned continuation lines of list items."""

    text: str
    indent: float = 0.0


def split_inline_list_items(line: str) -> list[str]:
    """
    Break a logical line that packs several list items into one item per line.

    '• a • b' gives ['• a', '• b'] and '1. First 2. Second' gives
    ['1. First', '2. Second']. A single enumeration marker is left alone so
    numbered headings stay intact.
    """
    normalized = " ".join(line.split())
    if not normalized:
        return [""]

    segments = [
        segment.strip()
        for segment in INLINE_BULLET.sub("\n• ", normalized).split("\n")
        if segment.strip()
    ]

    items: list[str] = []
    for segment in segments:
        matches = list(INLINE_ENUMERATION.finditer(segment))
        if len(matches) <= 1:
            items.append(segment)
            continue

        lead = segment[: matches[0].start()].strip()
        if lead:
            items.append(lead)

        for index, match in enumerate(matches):
            content_end = matches[index + 1].start() if index + 1 < len(matches) else len(segment)
            content = segment[match.end() : content_end].strip()
            if content:
                items.append(f"{match.group(1)} {content}")

    return items or [normalized]


def _break_word(word: str, face: FontFace, size: float, max_width: float) -> list[str]:
    """Split a word wider than the line into pieces that fit (at least one char each)."""
    pieces: list[str] = []
    current = ""
    for char in word:
        if current and face.text_width(current + char, size) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_words(text: str, face: FontFace, size: float, max_width: float) -> list[str]:
    """Greedily fill lines word by word without exceeding max_width."""
    lines: list[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if face.text_width(candidate, size) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if face.text_width(word, size) > max_width:
            pieces = _break_word(word, face, size, max_width)
            lines.extend(pieces[:-1])
            current = pieces[-1]
        else:
            current = word

    if current:
        lines.append(current)
    return lines


def wrap_list_item(
    line: str,
    face: FontFace,
    size: float,
    max_width: float,
    min_column: float = 24,
) -> list[Line]:
    """Wrap one logical line, hanging continuation lines under a list marker's text."""
    match = LIST_MARKER.match(line)
    if not match:
        return [Line(text) for text in wrap_words(line, face, size, max_width)] or [Line("")]

    marker = f"{match.group(1)} "
    indent = face.text_width(marker, size)
    available = max(min_column, max_width - indent)
    content = wrap_words(match.group(2), face, size, available)
    if not content:
        return [Line(marker.rstrip())]

    return [Line(marker + content[0])] + [Line(part, indent) for part in content[1:]]


def wrap_block(
    text: str,
    face: FontFace,
    size: float,
    max_width: float,
    min_column: float = 24,
) -> list[Line]:
    """
    Wrap a block's text into rendered lines.

    Explicit newlines are honoured first (a blank line stays blank), then
    inline list items are split apart and each piece is word-wrapped.
    """
    lines: list[Line] = []
    for raw_line in LINE_BREAK.split(text):
        trimmed = raw_line.strip()
        if not trimmed:
            lines.append(Line(""))
            continue

        for item in split_inline_list_items(trimmed):
            lines.extend(wrap_list_item(item, face, size, max_width, min_column))

    return lines
