"""Convert row-packed XBM bitmaps into page-packed (SSD1306/QMK) byte arrays."""

__version__ = "0.1.0"
