from __future__ import annotations

import matplotlib
matplotlib.use('Agg')  # headless
import matplotlib.pyplot as plt
import numpy as np

from .analysis import flipped_bits, lsb_bits, payload_span
from .ppm import RasterImage
from .steg import StegConfig


def _byte_rows(image: RasterImage, flat: np.ndarray) -> np.ndarray:
    # one row per image row, three bytes per pixel
    return flat.reshape(image.height, image.width * 3)


def _figsize(image: RasterImage) -> tuple:
    return 8, min(12, 8 * image.height / max(1, image.width * 3) + 1)


def plot_lsb_bits(image: RasterImage, out_path: str, cfg: StegConfig | None = None) -> None:
    """LSB of every pixel byte, with the carrier region tinted red."""
    span = payload_span(image, cfg)
    plane = _byte_rows(image, lsb_bits(image))
    tint = np.zeros(plane.size, dtype=np.float64)
    tint[:span] = 1.0
    tint = np.ma.masked_equal(_byte_rows(image, tint), 0.0)

    fig, ax = plt.subplots(figsize=_figsize(image), tight_layout=True)
    ax.imshow(plane, cmap='gray', vmin=0, vmax=1, interpolation='nearest', aspect='auto')
    ax.imshow(tint, cmap='autumn', alpha=0.35, vmin=0, vmax=1, interpolation='nearest', aspect='auto')
    ax.set_title(f'LSB bits of {image.id or "image"}: {span} carrier bytes')
    ax.set_xlabel('pixel byte in row')
    ax.set_ylabel('row')
    fig.savefig(out_path)
    plt.close(fig)


def plot_flipped_bits(cover: RasterImage, stego: RasterImage, out_path: str,
                      cfg: StegConfig | None = None) -> None:
    """Pixel bytes whose LSB changed between cover and stego."""
    diff = _byte_rows(cover, lsb_bits(cover) ^ lsb_bits(stego))
    counts = flipped_bits(cover, stego, cfg)

    fig, ax = plt.subplots(figsize=_figsize(cover), tight_layout=True)
    ax.imshow(diff, cmap='gray_r', vmin=0, vmax=1, interpolation='nearest', aspect='auto')
    ax.set_title(f"flipped LSBs: {counts['flipped']} in carrier, {counts['flipped_outside']} outside")
    ax.axis('off')
    fig.savefig(out_path)
    plt.close(fig)
