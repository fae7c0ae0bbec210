"""Minimal ZIP container reader.

Locates a single named entry through the central directory and returns its
decompressed bytes. Only stored (0) and raw deflate (8) entries are supported.
"""

import logging
import struct
import zlib
from collections.abc import Iterator
from dataclasses import dataclass

from docforge.exceptions import ArchiveFormatError

logger = logging.getLogger(__name__)

EOCD_SIGNATURE = 0x06054B50
CENTRAL_DIR_SIGNATURE = 0x02014B50
LOCAL_HEADER_SIGNATURE = 0x04034B50

EOCD_SIZE = 22
CENTRAL_DIR_HEADER_SIZE = 46
LOCAL_HEADER_SIZE = 30

# Fixed EOCD record plus the largest possible archive comment
MAX_EOCD_SEARCH = EOCD_SIZE + 0xFFFF

METHOD_STORED = 0
METHOD_DEFLATE = 8


@dataclass(frozen=True)
class ArchiveEntry:
    """A central-directory record pointing at one compressed byte range."""

    name: str
    compression_method: int
    compressed_size: int
    uncompressed_size: int
    local_header_offset: int


def _read_u16(data: bytes, offset: int) -> int:
    return struct.unpack_from("<H", data, offset)[0]


def _read_u32(data: bytes, offset: int) -> int:
    return struct.unpack_from("<I", data, offset)[0]


def _find_end_of_central_directory(data: bytes) -> int:
    """Scan backward for the EOCD signature within the last 65,557 bytes."""
    search_start = max(0, len(data) - MAX_EOCD_SEARCH)
    for offset in range(len(data) - EOCD_SIZE, search_start - 1, -1):
        if _read_u32(data, offset) == EOCD_SIGNATURE:
            return offset
    raise ArchiveFormatError(ArchiveFormatError.MISSING_DIRECTORY)


def iter_entries(data: bytes) -> Iterator[ArchiveEntry]:
    """
    Walk the central directory and yield one ArchiveEntry per record.

    Args:
        data: Complete archive bytes

    Yields:
        ArchiveEntry records in directory order

    Raises:
        ArchiveFormatError: If the directory is missing or a record is corrupt
    """
    eocd_offset = _find_end_of_central_directory(data)
    central_dir_size = _read_u32(data, eocd_offset + 12)
    central_dir_offset = _read_u32(data, eocd_offset + 16)
    central_dir_end = central_dir_offset + central_dir_size

    ptr = central_dir_offset
    while ptr < central_dir_end:
        truncated = ptr + CENTRAL_DIR_HEADER_SIZE > len(data)
        if truncated or _read_u32(data, ptr) != CENTRAL_DIR_SIGNATURE:
            raise ArchiveFormatError(ArchiveFormatError.CORRUPT_ENTRY)

        compression_method = _read_u16(data, ptr + 10)
        compressed_size = _read_u32(data, ptr + 20)
        uncompressed_size = _read_u32(data, ptr + 24)
        name_length = _read_u16(data, ptr + 28)
        extra_length = _read_u16(data, ptr + 30)
        comment_length = _read_u16(data, ptr + 32)
        local_header_offset = _read_u32(data, ptr + 42)

        name_start = ptr + CENTRAL_DIR_HEADER_SIZE
        name = data[name_start : name_start + name_length].decode("utf-8", errors="replace")

        yield ArchiveEntry(
            name=name,
            compression_method=compression_method,
            compressed_size=compressed_size,
            uncompressed_size=uncompressed_size,
            local_header_offset=local_header_offset,
        )

        ptr = name_start + name_length + extra_length + comment_length


def read_raw(data: bytes, entry: ArchiveEntry) -> bytes:
    """Return the still-compressed bytes of an entry after re-validating its local header."""
    offset = entry.local_header_offset
    if offset + LOCAL_HEADER_SIZE > len(data) or _read_u32(data, offset) != LOCAL_HEADER_SIGNATURE:
        raise ArchiveFormatError(ArchiveFormatError.BAD_LOCAL_HEADER)

    # The local copy of name/extra lengths may differ from the central directory
    local_name_length = _read_u16(data, offset + 26)
    local_extra_length = _read_u16(data, offset + 28)
    data_start = offset + LOCAL_HEADER_SIZE + local_name_length + local_extra_length
    return data[data_start : data_start + entry.compressed_size]


def inflate_entry(data: bytes, entry: ArchiveEntry) -> bytes:
    """Decompress one entry according to its compression method."""
    raw = read_raw(data, entry)

    if entry.compression_method == METHOD_STORED:
        return raw

    if entry.compression_method == METHOD_DEFLATE:
        try:
            inflated = zlib.decompress(raw, wbits=-zlib.MAX_WBITS)
        except zlib.error as e:
            logger.warning(f"Failed to inflate archive entry '{entry.name}': {e}")
            raise ArchiveFormatError(ArchiveFormatError.CORRUPT_ENTRY) from e

        if entry.uncompressed_size and len(inflated) != entry.uncompressed_size:
            raise ArchiveFormatError(ArchiveFormatError.UNEXPECTED_SIZE)
        return inflated

    raise ArchiveFormatError(ArchiveFormatError.UNSUPPORTED_METHOD)


def find_and_inflate(container_bytes: bytes, entry_path: str) -> bytes:
    """
    Extract and decompress a single named entry from a ZIP container.

    Args:
        container_bytes: Complete archive bytes
        entry_path: Path of the entry inside the archive (e.g. 'word/document.xml')

    Returns:
        The entry's uncompressed bytes

    Raises:
        ArchiveFormatError: With a specific reason when the archive is malformed
            or the entry does not exist
    """
    for entry in iter_entries(container_bytes):
        if entry.name == entry_path:
            return inflate_entry(container_bytes, entry)

    raise ArchiveFormatError(ArchiveFormatError.ENTRY_NOT_FOUND)
