from __future__ import annotations

import numpy as np

from .ppm import BytesLike

CHAR_BIT = 8


def _bits_from_bytes(data: bytes) -> np.ndarray:
    a = np.frombuffer(data, dtype=np.uint8)
    return np.unpackbits(a, bitorder='big')


def _bytes_from_bits(bits: np.ndarray) -> bytes:
    # callers only pass whole bytes' worth of bits
    return np.packbits(bits.astype(np.uint8), bitorder='big').tobytes()


def capacity_bytes(pixel_byte_count: int) -> int:
    """Payload bytes that fit in ``pixel_byte_count`` carrier bytes (one bit each)."""
    return pixel_byte_count // CHAR_BIT


def pack_bits(payload: bytes, into: bytearray, start: int = 0) -> None:
    """Write ``payload`` MSB-first into the low bit of ``into[start:]``.

    The upper 7 bits of each touched byte are preserved. The caller is
    responsible for ``start + 8 * len(payload) <= len(into)``.
    """
    bits = _bits_from_bytes(bytes(payload))
    if bits.size == 0:
        return
    carrier = np.frombuffer(into, dtype=np.uint8)
    end = start + bits.size
    carrier[start:end] = (carrier[start:end] & 0xFE) | bits


def unpack_bits(buf: BytesLike, start: int = 0, max_bytes: int | None = None) -> bytes | None:
    """Reassemble bytes MSB-first from the low bit of ``buf[start:]``.

    With ``max_bytes`` set, exactly that many bytes are read whatever their
    value (fewer if ``buf`` runs out of whole bytes). Without it, bytes are
    read up to the first zero byte, which is not returned; if the buffer is
    exhausted before a zero byte appears, None is returned.
    """
    carrier = np.frombuffer(bytes(buf), dtype=np.uint8)
    available = max(0, carrier.size - start) // CHAR_BIT
    if max_bytes is not None:
        n = min(max_bytes, available)
        return _bytes_from_bits(carrier[start:start + n * CHAR_BIT] & 1)

    data = np.frombuffer(
        _bytes_from_bits(carrier[start:start + available * CHAR_BIT] & 1), dtype=np.uint8
    )
    zeros = np.flatnonzero(data == 0)
    if zeros.size == 0:
        return None
    return data[:zeros[0]].tobytes()
