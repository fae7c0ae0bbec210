"""Low-level PDF 1.4 serialization.

Objects are appended to a table and numbered densely from 1 in the order
they are added. Serialization writes every object, recording the byte offset
where its ``N 0 obj`` line starts, then a classic cross-reference table that
points at exactly those offsets.
"""

HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"


def format_number(value: float) -> str:
    """Format a coordinate with at most two decimals and no trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_color(rgb: tuple[int, int, int]) -> str:
    """Convert 0-255 RGB to the operands of the 'rg' operator."""
    return " ".join(format_number(channel / 255) for channel in rgb)


def encode_text(text: str) -> bytes:
    """Encode text for a WinAnsiEncoding font; unmappable characters become '?'."""
    return text.encode("cp1252", errors="replace")


def pdf_string(text: str) -> bytes:
    """Build a PDF literal string, escaping delimiters and non-printable bytes."""
    out = bytearray(b"(")
    for byte in encode_text(text):
        if byte in (0x28, 0x29, 0x5C):
            out += b"\\" + bytes([byte])
        elif 32 <= byte < 127:
            out.append(byte)
        else:
            out += b"\\%03o" % byte
    out += b")"
    return bytes(out)


class PdfWriter:
    """Append-only PDF object table."""

    def __init__(self):
        self._objects: list[bytes | None] = []

    def __len__(self) -> int:
        return len(self._objects)

    def add(self, body: str | bytes) -> int:
        """Append an object body and return its id."""
        self._objects.append(body.encode("latin-1") if isinstance(body, str) else body)
        return len(self._objects)

    def add_stream(self, data: bytes, dictionary: str = "") -> int:
        """Append a stream object; /Length is computed from data."""
        entries = f"{dictionary} /Length {len(data)}".strip()
        return self.add(f"<< {entries} >>\nstream\n".encode("latin-1") + data + b"\nendstream")

    def reserve(self) -> int:
        """Claim the next id for an object whose body depends on later objects."""
        self._objects.append(None)
        return len(self._objects)

    def fill(self, object_id: int, body: str | bytes) -> None:
        """Provide the body of a previously reserved object."""
        if self._objects[object_id - 1] is not None:
            raise RuntimeError(f"PDF object {object_id} is already written")
        self._objects[object_id - 1] = body.encode("latin-1") if isinstance(body, str) else body

    def serialize(self, root_id: int) -> bytes:
        """
        Write the complete file: header, objects, xref table, trailer.

        Args:
            root_id: Id of the document catalog

        Returns:
            The PDF file bytes

        Raises:
            RuntimeError: If a reserved object was never filled
        """
        buffer = bytearray(HEADER)
        offsets: list[int] = []

        for object_id, body in enumerate(self._objects, start=1):
            if body is None:
                raise RuntimeError(f"PDF object {object_id} was reserved but never written")
            offsets.append(len(buffer))
            buffer += f"{object_id} 0 obj\n".encode("latin-1")
            buffer += body
            buffer += b"\nendobj\n"

        xref_start = len(buffer)
        size = len(self._objects) + 1
        buffer += f"xref\n0 {size}\n".encode("latin-1")
        buffer += b"0000000000 65535 f \n"
        for offset in offsets:
            buffer += f"{offset:010d} 00000 n \n".encode("latin-1")

        buffer += (
            f"trailer\n<< /Size {size} /Root {root_id} 0 R >>\nstartxref\n{xref_start}\n%%EOF\n"
        ).encode("latin-1")
        return bytes(buffer)
