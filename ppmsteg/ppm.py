"""
Binary PPM (P6) codec.

Layout accepted by ``parse``:

    P6 <ws> width <ws> height <ws> maxval <one ws byte> <3*width*height pixel bytes>

where <ws> is a run of space, tab, LF, CR bytes. The header is kept verbatim
so that ``serialize(parse(b)) == b``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Tuple, Union

import numpy as np
from PIL import Image

from .errors import FormatError

log = logging.getLogger(__name__)

PPM_MAGIC = b"P6"
MAX_COLOR = 255
WHITESPACE = frozenset(b" \t\n\r")
DIGITS = frozenset(b"0123456789")
# far beyond any buffer a header could describe
MAX_FIELD_DIGITS = 20

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(eq=False)
class RasterImage:
    width: int
    height: int
    max_color: int
    header_bytes: bytearray
    pixel_bytes: bytearray
    id: str | None = None

    def __post_init__(self) -> None:
        # always take private copies of the buffers
        self.header_bytes = bytearray(self.header_bytes)
        self.pixel_bytes = bytearray(self.pixel_bytes)
        if self.width <= 0 or self.height <= 0:
            raise FormatError(f"bad image dimensions {self.width}x{self.height}", self.id)
        if self.max_color != MAX_COLOR:
            raise FormatError(f"unsupported max color value {self.max_color}", self.id)
        expected = 3 * self.width * self.height
        if len(self.pixel_bytes) != expected:
            raise FormatError(
                f"expected {expected} pixel bytes, got {len(self.pixel_bytes)}", self.id
            )

    def __str__(self) -> str:
        return f"ppm: {self.width}x{self.height}"


def _next_digits(data: BytesLike, index: int) -> Tuple[bytes, int] | None:
    """Skip whitespace, then read one or more digits starting at ``index``.

    Returns ``(digits, index just past the digits)`` or None when no digits
    are found.
    """
    n = len(data)
    while index < n and data[index] in WHITESPACE:
        index += 1
    start = index
    while index < n and data[index] in DIGITS:
        index += 1
    if index == start:
        return None
    return bytes(data[start:index]), index


def parse(data: BytesLike, id: str | None = None) -> RasterImage:
    if bytes(data[:2]) != PPM_MAGIC:
        raise FormatError("bad image format: missing P6 magic", id)

    fields = []
    index = 2
    for name in ("width", "height", "max color value"):
        res = _next_digits(data, index)
        if res is None:
            raise FormatError(f"bad image format: missing or non-numeric {name}", id)
        digits, index = res
        digits = digits.lstrip(b"0") or b"0"
        if len(digits) > MAX_FIELD_DIGITS:
            raise FormatError(f"bad image format: {name} too large", id)
        fields.append(int(digits))
    width, height, max_color = fields

    if index >= len(data) or data[index] not in WHITESPACE:
        raise FormatError("bad image format: no separator before pixel data", id)
    pixels_index = index + 1

    if width <= 0 or height <= 0:
        raise FormatError(f"bad image dimensions {width}x{height}", id)
    if max_color != MAX_COLOR:
        raise FormatError(f"unsupported max color value {max_color}", id)
    expected = pixels_index + 3 * width * height
    if len(data) != expected:
        raise FormatError(
            f"bad image size: expected {expected} bytes, got {len(data)}", id
        )

    log.debug("parsed %s: %dx%d, %d header bytes", id or "image", width, height, pixels_index)
    return RasterImage(
        width=width,
        height=height,
        max_color=max_color,
        header_bytes=bytearray(data[:pixels_index]),
        pixel_bytes=bytearray(data[pixels_index:]),
        id=id,
    )


def serialize(image: RasterImage) -> bytes:
    return bytes(image.header_bytes) + bytes(image.pixel_bytes)


def clone(image: RasterImage) -> RasterImage:
    # RasterImage.__post_init__ copies both buffers
    return RasterImage(
        width=image.width,
        height=image.height,
        max_color=image.max_color,
        header_bytes=image.header_bytes,
        pixel_bytes=image.pixel_bytes,
        id=image.id,
    )


def meta(image: RasterImage) -> Dict[str, int]:
    return {
        "width": image.width,
        "height": image.height,
        "max_color": image.max_color,
        "n_header_bytes": len(image.header_bytes),
        "n_pixel_bytes": len(image.pixel_bytes),
    }


def to_array(image: RasterImage) -> np.ndarray:
    arr = np.frombuffer(image.pixel_bytes, dtype=np.uint8)
    return arr.reshape(image.height, image.width, 3).copy()


def to_pil(image: RasterImage) -> Image.Image:
    return Image.fromarray(to_array(image))


def read_ppm(path: str) -> RasterImage:
    with open(path, "rb") as f:
        data = f.read()
    return parse(data, id=os.path.basename(path))


def write_ppm(path: str, image: RasterImage) -> None:
    with open(path, "wb") as f:
        f.write(serialize(image))
