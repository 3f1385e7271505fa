from __future__ import annotations

import argparse
import sys
import unittest
from pathlib import Path
from typing import List

# --- robust imports for dev, frozen, or -m ---
try:
    # when frozen or run as a script under PyInstaller
    from xbm2qmk import __version__
    from xbm2qmk.convert import ConvertOptions, convert_file, convert_folder
    from xbm2qmk.core import Xbm2QmkError
except Exception:  # running as a package (python -m xbm2qmk.cli)
    from . import __version__
    from .convert import ConvertOptions, convert_file, convert_folder
    from .core import Xbm2QmkError


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {value!r}")
    return n


def _options_from_args(ns: argparse.Namespace) -> ConvertOptions:
    return ConvertOptions(
        symbol=getattr(ns, "symbol", None),
        emit_dims=ns.emit_dims,
        pad_short=ns.pad_short,
        preview_path=getattr(ns, "preview", None),
        preview_scale=getattr(ns, "preview_scale", 1),
        verbose=ns.verbose,
    )


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--emit-dims", action="store_true", help="emit width/height macros")
    p.add_argument(
        "--pad-short",
        action="store_true",
        help="zero-fill truncated bitmap data (prints a warning) instead of failing",
    )
    p.add_argument("--verbose", action="store_true", help="verbose logging (stderr)")


def run_selftest() -> int:
    loader = unittest.TestLoader()
    suite = loader.discover(start_dir=str(Path(__file__).parent.parent.parent / "tests"))
    runner = unittest.TextTestRunner(verbosity=2)
    res = runner.run(suite)
    return 0 if res.wasSuccessful() else 1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="xbm2qmk",
        description="Convert row-packed XBM bitmaps into page-packed (SSD1306/QMK) C arrays.",
    )
    ap.add_argument("--selftest", action="store_true", help="run the internal test suite and exit")
    ap.add_argument("--version", action="version", version=f"xbm2qmk {__version__}")

    sub = ap.add_subparsers(dest="cmd", required=False)

    # convert
    p_conv = sub.add_parser("convert", help="convert a single XBM (prints to stdout by default)")
    p_conv.add_argument("input", type=Path, metavar="input.xbm")
    p_conv.add_argument("-o", "--output", type=Path, help="write the C array here instead of stdout")
    p_conv.add_argument("--symbol", type=str, help="override array base name (default: XBM name)")
    p_conv.add_argument("--preview", type=Path, metavar="out.png", help="also render the result as an image")
    p_conv.add_argument(
        "--preview-scale", type=_positive_int, default=1, metavar="N", help="preview zoom factor"
    )
    _add_common_flags(p_conv)

    # folder
    p_fold = sub.add_parser("folder", help="convert every .xbm in a folder to <name>_qmk.c")
    p_fold.add_argument("dir", type=Path, metavar="dir")
    p_fold.add_argument("--out-dir", type=Path, help="output directory (defaults to the input folder)")
    p_fold.add_argument(
        "--sort",
        choices=["alpha", "natural"],
        default="alpha",
        help="processing order: 'alpha' (case-insensitive) or 'natural' (numeric-aware)",
    )
    _add_common_flags(p_fold)

    return ap


def main(argv: List[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    ap = build_parser()
    ns = ap.parse_args(argv)

    if ns.selftest and ns.cmd is None:
        sys.exit(run_selftest())

    if ns.cmd == "convert":
        try:
            res = convert_file(ns.input, out_path=ns.output, opts=_options_from_args(ns))
        except Xbm2QmkError as e:
            print(str(e), file=sys.stderr)
            sys.exit(2)
        if res.out_path is None:
            sys.stdout.write(res.text)
        return

    if ns.cmd == "folder":
        try:
            convert_folder(
                ns.dir,
                out_dir=ns.out_dir,
                opts=_options_from_args(ns),
                sort_kind=ns.sort,
            )
        except Xbm2QmkError as e:
            print(str(e), file=sys.stderr)
            sys.exit(2)
        return

    ap.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
