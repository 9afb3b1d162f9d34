from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    BAD_FORMAT = "BAD_FORMAT"
    STEG_TOO_BIG = "STEG_TOO_BIG"
    STEG_MSG = "STEG_MSG"
    STEG_NO_MSG = "STEG_NO_MSG"
    STEG_BAD_MSG = "STEG_BAD_MSG"


class StegError(ValueError):
    """Base class for codec and steganography failures.

    Every subclass pins ``kind``, so callers can either catch the specific
    class or catch ``StegError`` and branch on ``err.kind``. The base class
    itself has no kind.
    """

    kind: ErrorKind | None = None

    def __init__(self, detail: str, image_id: str | None = None):
        super().__init__(detail, image_id)
        self.detail = detail
        self.image_id = image_id

    def __str__(self) -> str:
        parts = [self.kind.value] if self.kind is not None else []
        if self.image_id:
            parts.append(self.image_id)
        parts.append(self.detail)
        return ": ".join(parts)


class FormatError(StegError):
    kind = ErrorKind.BAD_FORMAT


class CapacityError(StegError):
    kind = ErrorKind.STEG_TOO_BIG


class AlreadyHiddenError(StegError):
    kind = ErrorKind.STEG_MSG


class NoMessageError(StegError):
    kind = ErrorKind.STEG_NO_MSG


class CorruptMessageError(StegError):
    kind = ErrorKind.STEG_BAD_MSG
