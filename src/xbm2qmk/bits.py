from __future__ import annotations

from typing import Iterable, List, Sequence


BitGrid = List[List[int]]  # rows of 0/1


def grid_from_page_packed(width: int, height: int, data: Sequence[int]) -> BitGrid:
    """
    Unpack SSD1306-style pages into rows: pixel (x, y) is bit y%8 of
    byte (y/8)*width + x.
    """
    pages = (height + 7) // 8
    if len(data) < pages * width:
        raise ValueError(f"need {pages * width} bytes for {width}x{height}, got {len(data)}")
    return [
        [(data[(y >> 3) * width + x] >> (y & 7)) & 1 for x in range(width)]
        for y in range(height)
    ]


def count_set_bits(data: Iterable[int]) -> int:
    return sum(bin(b).count("1") for b in data)
