"""Base-14 font faces and their advance widths.

Widths are in 1/1000 em, taken from the Adobe AFM files for Helvetica and
Helvetica-Bold, keyed by the Unicode character they render under
WinAnsiEncoding.
"""

from dataclasses import dataclass, field

DEFAULT_WIDTH = 556

_HELVETICA_ASCII = [
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556,
    278, 278, 584, 584, 584, 556, 1015,
    667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833,
    722, 778, 667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611,
    278, 278, 278, 469, 556, 333,
    556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833,
    556, 556, 556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500,
    334, 260, 334, 584,
]  # fmt: skip

_HELVETICA_BOLD_ASCII = [
    278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556,
    333, 333, 584, 584, 584, 611, 975,
    722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833,
    722, 778, 667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611,
    333, 278, 333, 584, 556, 333,
    556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889,
    611, 611, 611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500,
    389, 280, 389, 584,
]  # fmt: skip

# (regular, bold) widths for common WinAnsi characters outside ASCII
_EXTENDED = {
    "•": (350, 350),
    "–": (556, 556),
    "—": (1000, 1000),
    "‘": (222, 278),
    "’": (222, 278),
    "“": (333, 500),
    "”": (333, 500),
    "…": (1000, 1000),
    "©": (737, 737),
    "®": (737, 737),
    "™": (1000, 1000),
    "°": (400, 400),
    "€": (556, 556),
    "\u00a0": (278, 278),
}


def _build_widths(ascii_widths: list[int], extended_index: int) -> dict[str, int]:
    widths = {chr(32 + offset): width for offset, width in enumerate(ascii_widths)}
    widths.update({char: pair[extended_index] for char, pair in _EXTENDED.items()})
    return widths


@dataclass(frozen=True)
class FontFace:
    """A standard Type1 font referenced by name from page resources."""

    resource: str
    base_font: str
    widths: dict[str, int] = field(repr=False, compare=False)

    def char_width(self, char: str) -> int:
        return self.widths.get(char, DEFAULT_WIDTH)

    def text_width(self, text: str, size: float) -> float:
        """Width of text in points at the given font size."""
        return sum(self.char_width(char) for char in text) * size / 1000


HELVETICA = FontFace("F1", "Helvetica", _build_widths(_HELVETICA_ASCII, 0))
HELVETICA_BOLD = FontFace("F2", "Helvetica-Bold", _build_widths(_HELVETICA_BOLD_ASCII, 1))

FONT_FACES = (HELVETICA, HELVETICA_BOLD)

# Ascender of Helvetica as a fraction of the em, used to place text by its top edge
HELVETICA_ASCENT = 0.718
