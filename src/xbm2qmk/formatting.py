from __future__ import annotations

import re
from typing import Iterable, List


def sanitize_symbol(name: str) -> str:
    """
    Sanitize into a valid C identifier:
    - Replace invalid chars with '_'
    - First char must be [A-Za-z_]
    - Preserve case
    """
    if not name:
        return "_"
    name = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if not re.match(r"[A-Za-z_]", name[0]):
        name = "_" + name
    return name


def upper_macro(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", name).upper()


def format_bytes_as_c_array(
    data: Iterable[int],
    items_per_line: int = 8,
) -> str:
    """
    Deterministic hex formatting: uppercase 0x00..0xFF, items_per_line per line.
    """
    if items_per_line < 1:
        raise ValueError("items_per_line must be >= 1")
    items: List[str] = []
    for b in data:
        if not 0 <= b <= 0xFF:
            raise ValueError(f"byte value out of range: {b}")
        items.append(f"0x{b:02X}")
    lines = []
    for i in range(0, len(items), items_per_line):
        lines.append("    " + ", ".join(items[i : i + items_per_line]))
    return ",\n".join(lines)


def generate_qmk_array(
    symbol: str,
    data: bytes,
    width: int | None = None,
    height: int | None = None,
    emit_dims: bool = False,
) -> str:
    array_name = f"{sanitize_symbol(symbol)}_qmk"
    dims = ""
    if emit_dims:
        if width is None or height is None:
            raise ValueError("emit_dims requires width and height")
        up = upper_macro(array_name)
        dims = (
            f"#define {up}_WIDTH   {width}\n"
            f"#define {up}_HEIGHT  {height}\n"
            "\n"
        )
    body_open = f"const char PROGMEM {array_name}[] = {{\n"
    arr = format_bytes_as_c_array(data)
    body_close = "\n};\n\n" if arr else "};\n\n"
    return dims + body_open + arr + body_close
