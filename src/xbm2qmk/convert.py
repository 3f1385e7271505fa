from __future__ import annotations

import re
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List

from .bits import count_set_bits
from .core import Xbm2QmkError, repack_rows_to_pages
from .formatting import generate_qmk_array, sanitize_symbol
from .preview import save_preview
from .xbm import XbmImage, parse_xbm, read_xbm


@dataclass(frozen=True)
class ConvertOptions:
    symbol: str | None = None
    emit_dims: bool = False
    pad_short: bool = False  # zero-fill truncated data (with a warning) instead of failing
    preview_path: Path | None = None
    preview_scale: int = 1
    verbose: bool = False


@dataclass(frozen=True)
class ConversionResult:
    symbol: str
    width: int
    height: int
    data: bytes  # page-packed
    text: str
    source: str
    out_path: Path | None = None


def _warn(msg: str) -> None:
    print(f"Warning: {msg}", file=sys.stderr)


def _convert_image(img: XbmImage, source: str, opts: ConvertOptions) -> ConversionResult:
    if img.padded:
        have = len(img.data) - img.padded
        _warn(
            f"did not read enough bytes ({have} of {len(img.data)}) in {source}; "
            f"padded with {img.padded} zero bytes"
        )

    data = repack_rows_to_pages(img.width, img.height, img.data)
    symbol = sanitize_symbol(opts.symbol or img.name)
    text = generate_qmk_array(
        symbol, data, width=img.width, height=img.height, emit_dims=opts.emit_dims
    )

    if opts.preview_path is not None:
        try:
            save_preview(opts.preview_path, img.width, img.height, data, scale=opts.preview_scale)
        except (OSError, ValueError) as exc:
            raise Xbm2QmkError(f"Could not write preview {opts.preview_path}: {exc}") from exc
        if opts.verbose:
            print(f"Wrote preview {opts.preview_path}", file=sys.stderr)

    return ConversionResult(
        symbol=symbol,
        width=img.width,
        height=img.height,
        data=data,
        text=text,
        source=source,
    )


def convert_text(text: str, source_name: str = "<string>", opts: ConvertOptions | None = None) -> ConversionResult:
    opts = opts or ConvertOptions()
    img = parse_xbm(text, source_name=source_name, pad_short=opts.pad_short)
    return _convert_image(img, source_name, opts)


def write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise Xbm2QmkError(f"Could not write {path}: {exc}") from exc


def _report_written(path: Path, res: ConversionResult) -> None:
    print(
        f"Wrote {path} ({len(res.data)} bytes, {count_set_bits(res.data)} pixels set)",
        file=sys.stderr,
    )


def convert_file(
    input_path: Path,
    out_path: Path | None = None,
    opts: ConvertOptions | None = None,
) -> ConversionResult:
    """
    Convert one .xbm file. With out_path=None nothing is written and the
    caller decides where result.text goes (the CLI prints it to stdout).
    """
    opts = opts or ConvertOptions()
    img = read_xbm(input_path, pad_short=opts.pad_short)
    res = _convert_image(img, str(input_path), opts)
    if out_path is None:
        return res

    write_text(out_path, res.text)
    if opts.verbose:
        _report_written(out_path, res)
    return replace(res, out_path=out_path)


def _alpha_key(stem: str) -> tuple[str, str]:
    return (stem.casefold(), stem)


def _natural_key(stem: str) -> tuple:
    parts = re.split(r"(\d+)", stem)
    key = []
    for part in parts:
        if part.isdigit():
            key.append((1, int(part)))
        else:
            key.append((0, part.casefold()))
    return tuple(key)


def sort_key_for_path(p: Path, sort_kind: str = "alpha") -> tuple:
    stem = p.stem
    if sort_kind == "natural":
        return (_natural_key(stem), stem)
    if sort_kind == "alpha":
        return _alpha_key(stem)
    raise ValueError(f"unknown sort_kind: {sort_kind!r}")


def convert_folder(
    input_dir: Path,
    out_dir: Path | None = None,
    opts: ConvertOptions | None = None,
    sort_kind: str = "alpha",
) -> List[ConversionResult]:
    """Convert every *.xbm in input_dir into <symbol>_qmk.c files."""
    opts = opts or ConvertOptions()
    if not input_dir.exists() or not input_dir.is_dir():
        raise Xbm2QmkError(f"Not a folder: {input_dir}")
    if opts.symbol is not None:
        raise Xbm2QmkError("A symbol override only applies to a single file")
    if opts.preview_path is not None:
        raise Xbm2QmkError("Preview output only applies to a single file")

    xbm_paths = sorted(
        [p for p in input_dir.glob("*.xbm") if p.is_file()],
        key=lambda p: sort_key_for_path(p, sort_kind),
    )
    if not xbm_paths:
        raise Xbm2QmkError("No .xbm files found")

    # convert everything first; a bad file leaves no partial output behind
    target_dir = out_dir or input_dir
    converted: List[ConversionResult] = []
    seen: dict[str, Path] = {}
    for p in xbm_paths:
        img = read_xbm(p, pad_short=opts.pad_short)
        res = _convert_image(img, str(p), opts)
        if res.symbol in seen:
            raise Xbm2QmkError(
                f"Symbol {res.symbol!r} declared by both {seen[res.symbol].name} and {p.name}"
            )
        seen[res.symbol] = p
        converted.append(replace(res, out_path=target_dir / f"{res.symbol}_qmk.c"))

    for res in converted:
        write_text(res.out_path, res.text)
        if opts.verbose:
            _report_written(res.out_path, res)
    return converted
