"""
Measurements of the LSB stream written by ``steg.hide``.

The carrier region is the run of pixel bytes holding magic + message +
terminator, one bit per byte from pixel byte 0. Pixel bytes past it are
untouched cover, so comparing the two regions shows what embedding did.
"""
from __future__ import annotations

from typing import Dict

import numpy as np

from .lsb import CHAR_BIT, capacity_bytes, unpack_bits
from .ppm import RasterImage
from .steg import TERMINATOR, StegConfig, check_magic


def _pixels(image: RasterImage) -> np.ndarray:
    return np.frombuffer(bytes(image.pixel_bytes), dtype=np.uint8)


def _ones_ratio(bits: np.ndarray) -> float:
    return float(bits.mean()) if bits.size else 0.0


def lsb_bits(image: RasterImage) -> np.ndarray:
    """Low bit of every pixel byte, in carrier order."""
    return _pixels(image) & 1


def payload_span(image: RasterImage, cfg: StegConfig | None = None) -> int:
    """Number of pixel bytes occupied by a hidden payload, 0 if there is none.

    An unterminated payload is taken to run over every whole carrier byte.
    """
    cfg = cfg or StegConfig()
    if not check_magic(image, cfg):
        return 0
    msg = unpack_bits(image.pixel_bytes, len(cfg.magic) * CHAR_BIT)
    if msg is None:
        return capacity_bytes(len(image.pixel_bytes)) * CHAR_BIT
    return (len(cfg.magic) + len(msg) + len(TERMINATOR)) * CHAR_BIT


def region_stats(image: RasterImage, cfg: StegConfig | None = None) -> Dict[str, float]:
    bits = lsb_bits(image)
    span = payload_span(image, cfg)
    return {
        "carrier_bytes": span,
        "cover_bytes": int(bits.size - span),
        "carrier_ones_ratio": _ones_ratio(bits[:span]),
        "cover_ones_ratio": _ones_ratio(bits[span:]),
    }


def flipped_bits(cover: RasterImage, stego: RasterImage, cfg: StegConfig | None = None) -> Dict[str, int]:
    """Count LSB flips between a cover and its stego copy, inside and outside the carrier region."""
    a, b = _pixels(cover), _pixels(stego)
    if a.size != b.size:
        raise ValueError(f"pixel byte counts differ: {a.size} != {b.size}")
    diff = (a ^ b) & 1
    span = payload_span(stego, cfg)
    return {
        "flipped": int(diff[:span].sum()),
        "flipped_outside": int(diff[span:].sum()),
        "upper_bits_changed": int(np.count_nonzero((a ^ b) & 0xFE)),
    }


def chi_square_lsb(image: RasterImage, start: int = 0, stop: int | None = None) -> float:
    # Westfeld pair-of-values statistic over pixel bytes [start:stop]
    h = np.bincount(_pixels(image)[start:stop], minlength=256).astype(np.float64)
    even, odd = h[0::2], h[1::2]
    e = (even + odd) / 2.0
    m = e > 0
    return float(np.sum((even[m] - e[m]) ** 2 / e[m] + (odd[m] - e[m]) ** 2 / e[m]))
