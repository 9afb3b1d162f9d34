"""
PPM image steganography toolkit (LSB).

Modules:
- ppm: P6 PPM parse/serialize with verbatim header preservation.
- lsb: capacity and MSB-first bit packing into pixel-byte LSBs.
- steg: hide/unhide a zero-terminated message behind a magic prefix.
- errors: typed failures, one per error kind.
- analysis: LSB measurements of the carrier region written by hide.
- viz: carrier and flipped-bit figures.
- cli: the ``ppmsteg`` command.
"""
from .errors import (
    AlreadyHiddenError,
    CapacityError,
    CorruptMessageError,
    ErrorKind,
    FormatError,
    NoMessageError,
    StegError,
)
from .ppm import RasterImage, clone, parse, serialize
from .steg import STEG_MAGIC, StegConfig, check_magic, hide, unhide

__all__ = [
    "AlreadyHiddenError",
    "CapacityError",
    "CorruptMessageError",
    "ErrorKind",
    "FormatError",
    "NoMessageError",
    "RasterImage",
    "STEG_MAGIC",
    "StegConfig",
    "StegError",
    "check_magic",
    "clone",
    "hide",
    "parse",
    "serialize",
    "unhide",
]

__version__ = "0.1.0"
