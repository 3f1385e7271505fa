import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from xbm2qmk.cli import build_parser, main

XBM = """\
#define diag_width 8
#define diag_height 8
static unsigned char diag_bits[] = {
   0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80 };
"""


class TestCli(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.dir = Path(self._td.name)
        self.xbm = self.dir / "diag.xbm"
        self.xbm.write_text(XBM, encoding="utf-8")

    def tearDown(self):
        self._td.cleanup()

    def test_convert_to_stdout(self):
        out = io.StringIO()
        with redirect_stdout(out):
            main(["convert", str(self.xbm)])
        self.assertEqual(
            out.getvalue(),
            "const char PROGMEM diag_qmk[] = {\n"
            "    0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80\n"
            "};\n\n",
        )

    def test_convert_to_file_with_preview(self):
        target = self.dir / "diag_qmk.c"
        png = self.dir / "diag.png"
        out = io.StringIO()
        with redirect_stdout(out):
            main(["convert", str(self.xbm), "-o", str(target), "--preview", str(png), "--emit-dims"])
        self.assertEqual(out.getvalue(), "")
        self.assertIn("#define DIAG_QMK_WIDTH   8", target.read_text(encoding="utf-8"))
        self.assertTrue(png.exists())

    def test_error_exit_code(self):
        bad = self.dir / "bad.xbm"
        bad.write_text(XBM.replace("diag_width 8", "diag_width 10"), encoding="utf-8")
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as cm:
            main(["convert", str(bad)])
        self.assertEqual(cm.exception.code, 2)
        self.assertIn("multiple of 8", err.getvalue())

    def test_folder(self):
        with redirect_stdout(io.StringIO()):
            main(["folder", str(self.dir), "--sort", "natural"])
        self.assertTrue((self.dir / "diag_qmk.c").exists())

    def test_no_command(self):
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as cm:
            main([])
        self.assertEqual(cm.exception.code, 1)

    def test_preview_scale_must_be_positive(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            build_parser().parse_args(["convert", "x.xbm", "--preview-scale", "0"])

    def test_unwritable_output_is_one_line_error(self):
        blocker = self.dir / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as cm:
            main(["convert", str(self.xbm), "-o", str(blocker / "out.c")])
        self.assertEqual(cm.exception.code, 2)
        self.assertTrue(err.getvalue().startswith("Could not write "))

    def test_directory_as_input_is_one_line_error(self):
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as cm:
            main(["convert", str(self.dir)])
        self.assertEqual(cm.exception.code, 2)
        self.assertTrue(err.getvalue().startswith("Could not read "))

    def test_verbose_reports_to_stderr(self):
        target = self.dir / "diag_qmk.c"
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            main(["convert", str(self.xbm), "-o", str(target), "--verbose"])
        self.assertEqual(out.getvalue(), "")
        self.assertIn("(8 bytes, 8 pixels set)", err.getvalue())
