"""Shared utilities used across the application."""

import base64
import binascii
import re

_BLANK_LINE_RUN = re.compile(r"\n{3,}")
_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_ ]")
_EXTENSION = re.compile(r"\.[^/.]+$")


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of three or more newlines to a single blank line."""
    return _BLANK_LINE_RUN.sub("\n\n", text)


def get_extension(file_name: str | None) -> str:
    """Return the lower-cased text after the last dot, or '' when there is none."""
    if not file_name or "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def safe_output_name(file_name: str | None, default: str = "document") -> str:
    """
    Build a download-safe base name from a user-supplied file name.

    Strips the extension, drops anything but letters, digits, dashes,
    underscores and spaces, then joins words with dashes.

    Args:
        file_name: Declared file name (may be None or empty)
        default: Name to use when nothing safe remains

    Returns:
        Base name without extension
    """
    without_ext = _EXTENSION.sub("", file_name or default)
    cleaned = _UNSAFE_NAME_CHARS.sub("", without_ext).strip()
    return "-".join(cleaned.split()) or default


def decode_base64_payload(data: str) -> bytes:
    """
    Decode a base64 upload payload, tolerating data-URL prefixes.

    Raises:
        ValueError: If the payload is not valid base64
    """
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=False)
    except binascii.Error as e:
        raise ValueError("Uploaded file data is not valid base64") from e
