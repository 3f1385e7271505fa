from __future__ import annotations

from typing import Sequence


class Xbm2QmkError(Exception):
    """User-facing one-line errors."""


class InvalidDimensions(Xbm2QmkError):
    pass


class LengthMismatch(Xbm2QmkError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Bitmap data has {actual} bytes, expected {expected} (width*height/8)"
        )
        self.expected = expected
        self.actual = actual


class AllocationFailure(Xbm2QmkError):
    pass


def check_dimensions(width: int, height: int) -> None:
    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidDimensions(f"{label} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensions(f"{label} must be positive, got {value}")
        if value % 8 != 0:
            raise InvalidDimensions(f"{label} must be a multiple of 8, got {value}")


def expected_length(width: int, height: int) -> int:
    check_dimensions(width, height)
    return (width * height) // 8


def _prepare(width: int, height: int, source: Sequence[int]) -> bytearray:
    total = expected_length(width, height)
    if len(source) != total:
        raise LengthMismatch(expected=total, actual=len(source))
    if any(not 0 <= b <= 0xFF for b in source):
        raise ValueError("source values must be bytes in 0..255")
    try:
        return bytearray(total)
    except MemoryError as exc:
        raise AllocationFailure(
            f"Could not allocate {total} bytes for a {width}x{height} bitmap"
        ) from exc


def repack_rows_to_pages(width: int, height: int, source: Sequence[int]) -> bytes:
    """
    Row-packed (XBM) -> page-packed (SSD1306/QMK).

    Source: byte y*(width/8) + x/8, bit x%8 (LSB = leftmost pixel).
    Dest  : byte (y/8)*width + x,   bit y%8 (LSB = top row of the page).
    """
    dst = _prepare(width, height, source)
    bytes_per_row = width // 8
    for y in range(height):
        row_base = y * bytes_per_row
        page_base = (y // 8) * width
        mask = 1 << (y % 8)
        for x in range(width):
            if (source[row_base + (x // 8)] >> (x % 8)) & 1:
                dst[page_base + x] |= mask
    return bytes(dst)


def repack_pages_to_rows(width: int, height: int, source: Sequence[int]) -> bytes:
    """Inverse of repack_rows_to_pages."""
    dst = _prepare(width, height, source)
    bytes_per_row = width // 8
    for y in range(height):
        row_base = y * bytes_per_row
        page_base = (y // 8) * width
        shift = y % 8
        for x in range(width):
            if (source[page_base + x] >> shift) & 1:
                dst[row_base + (x // 8)] |= 1 << (x % 8)
    return bytes(dst)
