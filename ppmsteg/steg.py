"""
Hide and recover a byte message in the pixel LSBs of a PPM image.

The embedded payload is ``magic + message + b"\\x00"``, written one bit per
pixel byte, most significant bit first, starting at the first pixel byte.
The magic prefix is how ``hide`` refuses to overwrite an existing message
and how ``unhide`` tells a carrier image from a plain one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import AlreadyHiddenError, CapacityError, CorruptMessageError, NoMessageError
from .lsb import CHAR_BIT, capacity_bytes, pack_bits, unpack_bits
from .ppm import BytesLike, RasterImage, clone

log = logging.getLogger(__name__)

STEG_MAGIC = b"stg"
TERMINATOR = b"\x00"


@dataclass(frozen=True)
class StegConfig:
    magic: bytes = STEG_MAGIC

    def __post_init__(self) -> None:
        if not isinstance(self.magic, bytes) or not self.magic:
            raise ValueError("magic must be a non-empty bytes prefix")


def check_magic(image: RasterImage, cfg: StegConfig | None = None) -> bool:
    cfg = cfg or StegConfig()
    return unpack_bits(image.pixel_bytes, 0, len(cfg.magic)) == cfg.magic


def max_message_length(image: RasterImage, cfg: StegConfig | None = None) -> int:
    cfg = cfg or StegConfig()
    overhead = len(cfg.magic) + len(TERMINATOR)
    return max(0, capacity_bytes(len(image.pixel_bytes)) - overhead)


def hide(image: RasterImage, message: BytesLike, cfg: StegConfig | None = None) -> RasterImage:
    """Return a copy of ``image`` carrying ``message``; ``image`` is left untouched.

    Raises:
        AlreadyHiddenError: ``image`` already starts with the magic prefix.
        CapacityError: magic + message + terminator needs more than
            ``len(pixel_bytes) // 8`` bytes.
        TypeError: ``message`` is a str rather than bytes.
        ValueError: ``message`` contains a zero byte, which would be read
            back as the terminator.

    TypeError and ValueError reject the arguments themselves and carry no
    ``ErrorKind``; only the two image-state failures are ``StegError``.
    """
    cfg = cfg or StegConfig()
    if isinstance(message, str):
        raise TypeError("message must be bytes; encode text before hiding it")
    message = bytes(message)
    if TERMINATOR in message:
        raise ValueError("message must not contain a zero byte")

    if check_magic(image, cfg):
        raise AlreadyHiddenError("image already contains a hidden message", image.id)
    needed = len(cfg.magic) + len(message) + len(TERMINATOR)
    available = capacity_bytes(len(image.pixel_bytes))
    if needed > available:
        raise CapacityError(
            f"message too big to be hidden in image ({needed} > {available} bytes)", image.id
        )

    out = clone(image)
    pack_bits(cfg.magic + message + TERMINATOR, out.pixel_bytes, 0)
    log.debug("hid %d message bytes in %s (%d/%d bytes used)",
              len(message), image.id or "image", needed, available)
    return out


def unhide(image: RasterImage, cfg: StegConfig | None = None) -> bytes:
    """Return the message hidden in ``image``, without magic or terminator.

    Raises:
        NoMessageError: the pixel bytes do not start with the magic prefix.
        CorruptMessageError: the terminator is missing.
    """
    cfg = cfg or StegConfig()
    if not check_magic(image, cfg):
        raise NoMessageError("image does not have a message", image.id)
    msg = unpack_bits(image.pixel_bytes, len(cfg.magic) * CHAR_BIT)
    if msg is None:
        raise CorruptMessageError("bad message: terminator not found", image.id)
    log.debug("recovered %d message bytes from %s", len(msg), image.id or "image")
    return msg
