"""Logo image conversion into PDF image XObjects."""

import io
import logging
import struct
import zlib
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

JPEG_SOI = b"\xff\xd8"
# Start-of-frame markers (baseline, extended, progressive, lossless...), minus DHT/JPG/DAC
_SOF_MARKERS = {0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF}
_JPEG_COLOR_SPACES = {1: "/DeviceGray", 3: "/DeviceRGB"}


@dataclass(frozen=True)
class LogoAsset:
    """Raw logo bytes as fetched, with the declared content type."""

    data: bytes
    content_type: str = "image/png"


@dataclass(frozen=True)
class PdfImage:
    width: int
    height: int
    dictionary: str
    stream: bytes

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.width


def _jpeg_frame(data: bytes) -> tuple[int, int, int] | None:
    """Return (width, height, components) from a JPEG's start-of-frame segment."""
    i = 2
    while i + 4 <= len(data):
        if data[i] != 0xFF:
            return None
        marker = data[i + 1]
        if marker == 0xFF:
            i += 1
            continue
        if marker in (0xD8, 0x01) or 0xD0 <= marker <= 0xD7:
            i += 2
            continue

        (length,) = struct.unpack_from(">H", data, i + 2)
        if marker in _SOF_MARKERS:
            if i + 10 > len(data):
                return None
            height, width = struct.unpack_from(">HH", data, i + 5)
            return width, height, data[i + 9]
        i += 2 + length
    return None


def _jpeg_image(data: bytes) -> PdfImage | None:
    frame = _jpeg_frame(data)
    if frame is None:
        return None
    width, height, components = frame
    color_space = _JPEG_COLOR_SPACES.get(components)
    if not width or not height or color_space is None:
        return None
    return PdfImage(
        width=width,
        height=height,
        dictionary=(
            f"/Type /XObject /Subtype /Image /Width {width} /Height {height} "
            f"/ColorSpace {color_space} /BitsPerComponent 8 /Filter /DCTDecode"
        ),
        stream=data,
    )


def _raster_image(data: bytes) -> PdfImage:
    """Decode any Pillow-readable image to RGB on a white background."""
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
            rgba = image.convert("RGBA")
            rgb = Image.new("RGB", rgba.size, (255, 255, 255))
            rgb.paste(rgba, mask=rgba.getchannel("A"))
        else:
            rgb = image.convert("RGB")

    width, height = rgb.size
    return PdfImage(
        width=width,
        height=height,
        dictionary=(
            f"/Type /XObject /Subtype /Image /Width {width} /Height {height} "
            "/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /FlateDecode"
        ),
        stream=zlib.compress(rgb.tobytes()),
    )


def load_image(asset: LogoAsset) -> PdfImage | None:
    """
    Convert a logo asset to an embeddable image.

    Args:
        asset: Fetched logo bytes

    Returns:
        PdfImage, or None when the bytes cannot be decoded (the logo is then omitted)
    """
    if not asset.data:
        return None

    if asset.data.startswith(JPEG_SOI):
        image = _jpeg_image(asset.data)
        if image is not None:
            return image

    try:
        return _raster_image(asset.data)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning(
            f"Omitting undecodable logo image: {e}",
            extra={"content_type": asset.content_type, "size": len(asset.data)},
        )
        return None
