"""Plain text passthrough."""


class PlainTextExtractor:
    """Decode a .txt upload as UTF-8 without further transformation."""

    def extract(self, content: bytes) -> str:
        return content.decode("utf-8", errors="replace")
