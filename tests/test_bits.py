import unittest

from xbm2qmk.bits import count_set_bits, grid_from_page_packed


class TestPageGrid(unittest.TestCase):
    def test_first_column_and_last_row(self):
        # 8x16: column 0 of page 0 fully set, bottom row (page 1, bit 7) fully set
        data = bytes([0xFF] + [0x00] * 7 + [0x80] * 8)
        grid = grid_from_page_packed(8, 16, data)
        self.assertEqual(len(grid), 16)
        for y in range(8):
            self.assertEqual(grid[y], [1, 0, 0, 0, 0, 0, 0, 0])
        for y in range(8, 15):
            self.assertEqual(grid[y], [0] * 8)
        self.assertEqual(grid[15], [1] * 8)

    def test_short_data_rejected(self):
        with self.assertRaises(ValueError):
            grid_from_page_packed(8, 8, bytes(7))


class TestCountSetBits(unittest.TestCase):
    def test_count(self):
        self.assertEqual(count_set_bits(b""), 0)
        self.assertEqual(count_set_bits(bytes([0xFF, 0x01, 0x80, 0x00])), 10)
