from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .core import LengthMismatch, Xbm2QmkError, expected_length


class XbmParseError(Xbm2QmkError):
    pass


@dataclass(frozen=True)
class XbmImage:
    name: str
    width: int
    height: int
    data: bytes
    padded: int = 0  # zero bytes appended by pad_short


_WIDTH_RE = re.compile(r"^[ \t]*#[ \t]*define[ \t]+(\w+?)_width[ \t]+(\d+)", re.MULTILINE)
_HEIGHT_RE = re.compile(r"^[ \t]*#[ \t]*define[ \t]+(\w+?)_height[ \t]+(\d+)", re.MULTILINE)
_ARRAY_RE = re.compile(r"static[^=;{]*\[\s*\][^=;{]*=\s*\{(.*?)\}", re.DOTALL)
_COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)
_HEX_RE = re.compile(r"^0[xX]([0-9a-fA-F]+)$")


def _strip_comments(text: str) -> str:
    return _COMMENT_RE.sub(" ", text)


def parse_hex_list(body: str) -> bytes:
    """
    Collect the hex literals of a comma-separated initializer.
    Tokens that are not 0x.. literals are skipped.
    """
    out = bytearray()
    for token in body.split(","):
        m = _HEX_RE.match(token.strip())
        if not m:
            continue
        val = int(m.group(1), 16)
        if val > 0xFF:
            raise XbmParseError(f"Hex literal out of byte range: {token.strip()}")
        out.append(val)
    return bytes(out)


def parse_xbm(text: str, source_name: str = "<string>", pad_short: bool = False) -> XbmImage:
    """
    Extract name, dimensions and row-packed bytes from XBM source text.

    With pad_short=True a truncated data list is zero-filled up to the
    declared size instead of raising LengthMismatch; callers must report it.
    """
    clean = _strip_comments(text)

    wm = _WIDTH_RE.search(clean)
    hm = _HEIGHT_RE.search(clean)
    if not wm or not hm:
        raise XbmParseError(f"Failed to find width or height in {source_name}")
    name = wm.group(1)
    width = int(wm.group(2))
    height = int(hm.group(2))

    am = _ARRAY_RE.search(clean)
    if not am:
        raise XbmParseError(f"Failed to find bitmap data array in {source_name}")
    data = parse_hex_list(am.group(1))

    total = expected_length(width, height)
    padded = 0
    if len(data) != total:
        if not (pad_short and len(data) < total):
            raise LengthMismatch(expected=total, actual=len(data))
        padded = total - len(data)
        data = data + bytes(padded)

    return XbmImage(name=name, width=width, height=height, data=data, padded=padded)


def read_xbm(path: Path, pad_short: bool = False) -> XbmImage:
    if not path.exists():
        raise Xbm2QmkError(f"File not found: {path}")
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise Xbm2QmkError(f"Could not read {path}: {exc}") from exc
    return parse_xbm(text, source_name=str(path), pad_short=pad_short)
