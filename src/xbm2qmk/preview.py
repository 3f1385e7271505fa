from __future__ import annotations

from pathlib import Path
from typing import Sequence

from PIL import Image

from .bits import BitGrid, grid_from_page_packed
from .core import LengthMismatch, expected_length


def bitgrid_to_image(grid: BitGrid, scale: int = 1) -> Image.Image:
    """Black=1, white=0, mode "1"; scaled up with nearest-neighbor."""
    if scale < 1:
        raise ValueError("scale must be >= 1")
    h = len(grid)
    w = len(grid[0]) if h else 0
    img = Image.new("1", (w, h), 255)
    px = img.load()
    for y in range(h):
        row = grid[y]
        for x in range(w):
            if row[x] == 1:
                px[x, y] = 0
    if scale != 1:
        img = img.resize((w * scale, h * scale), Image.NEAREST)
    return img


def render_preview(width: int, height: int, page_data: Sequence[int], scale: int = 1) -> Image.Image:
    """
    Decode page-packed bytes back to pixels, so the converted array can be
    checked by eye before it is flashed.
    """
    total = expected_length(width, height)
    if len(page_data) != total:
        raise LengthMismatch(expected=total, actual=len(page_data))
    return bitgrid_to_image(grid_from_page_packed(width, height, page_data), scale=scale)


def save_preview(
    path: Path, width: int, height: int, page_data: Sequence[int], scale: int = 1
) -> Path:
    img = render_preview(width, height, page_data, scale=scale)
    path.parent.mkdir(parents=True, exist_ok=True)
    fmt = None if path.suffix else "PNG"
    img.save(path, format=fmt)
    return path
