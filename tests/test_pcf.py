"""
pcfont test suite
PCF decoder tests
"""

import io
import unittest

import pcfont
from pcfont.pcf import (
    read_header, read_tables, read_accelerators, read_encoding,
    read_bitmap_info, read_layout, read_glyph_index, read_glyph_metrics,
    read_bitmap_offset, iter_encoded, encoding_index, decode_pcf,
    TableDescriptor, Metrics, Encoding, BitmapTableInfo, GlyphLayout,
    PCF_BDF_ACCELERATORS,
)
from pcfont.basetypes import Coord, BoundingBox
from pcfont.glyph import Glyph
from .base import (
    BaseTester, GlyphSpec, build_pcf, build_reference_font,
)


class TestTables(BaseTester):
    """Test the header and table directory."""

    def test_header(self):
        magic, table_count = read_header(self.reference_pcf)
        self.assertEqual(magic, 1885562369)
        self.assertEqual(table_count, 8)

    def test_tables(self):
        tables = {
            1: TableDescriptor(format=14, size=1264, offset=136),
            2: TableDescriptor(format=14, size=100, offset=1400),
            4: TableDescriptor(format=270, size=492, offset=1500),
            8: TableDescriptor(format=14, size=3400, offset=1992),
            32: TableDescriptor(format=14, size=268, offset=5392),
            64: TableDescriptor(format=14, size=396, offset=5660),
            128: TableDescriptor(format=14, size=840, offset=6056),
            256: TableDescriptor(format=14, size=100, offset=6896),
        }
        self.assertEqual(read_tables(self.reference_pcf), tables)

    def test_table_count_matches_directory(self):
        data = build_pcf([GlyphSpec(65, (0, 1, 1, 1, 0), ('@',))])
        _, table_count = read_header(data)
        self.assertEqual(len(read_tables(data)), table_count)

    def test_bitmap_format(self):
        tables = read_tables(self.reference_pcf)
        self.assertEqual(tables[8].format, 0xe)


class TestSubTables(BaseTester):
    """Test accelerator, encoding and bitmap table decoding."""

    def setUp(self):
        super().setUp()
        self.tables = read_tables(self.reference_pcf)

    def test_accelerators(self):
        acc = read_accelerators(self.reference_pcf, self.tables)
        self.assertEqual(acc.font_ascent, 10)
        self.assertEqual(acc.font_descent, 2)
        self.assertEqual(acc.max_overlap, 1)
        self.assertEqual(
            (acc.no_overlap, acc.constant_metrics, acc.terminal_font,
            acc.constant_width, acc.ink_inside, acc.ink_metrics,
            acc.draw_direction, acc.padding),
            (0,) * 8
        )
        minbounds = Metrics(-1, 1, 0, -1, -7, 0)
        maxbounds = Metrics(3, 11, 11, 9, 3, 0)
        self.assertEqual(acc.minbounds, minbounds)
        self.assertEqual(acc.maxbounds, maxbounds)
        # no ink bounds in file: ink bounds equal logical bounds
        self.assertEqual(acc.ink_minbounds, minbounds)
        self.assertEqual(acc.ink_maxbounds, maxbounds)

    def test_accelerators_with_ink_bounds(self):
        data = build_reference_font(
            ink_bounds=((0, 1, 2, 3, 4), (5, 6, 7, 8, -9))
        )
        acc = read_accelerators(data, read_tables(data))
        self.assertEqual(acc.minbounds, Metrics(-1, 1, 0, -1, -7, 0))
        self.assertEqual(acc.ink_minbounds, Metrics(0, 1, 2, 3, 4, 0))
        self.assertEqual(acc.ink_maxbounds, Metrics(5, 6, 7, 8, -9, 0))

    def test_plain_accelerators_fallback(self):
        data = build_reference_font(omit=(PCF_BDF_ACCELERATORS,))
        tables = read_tables(data)
        self.assertNotIn(PCF_BDF_ACCELERATORS, tables)
        acc = read_accelerators(data, tables)
        self.assertEqual(acc.font_ascent, 10)

    def test_encoding(self):
        encoding = read_encoding(self.reference_pcf, self.tables)
        self.assertEqual(encoding, Encoding(
            min_byte2=0, max_byte2=126, min_byte1=0, max_byte1=0,
            default_char=1,
        ))

    def test_bitmap_info(self):
        info = read_bitmap_info(self.reference_pcf, self.tables)
        self.assertEqual(info, BitmapTableInfo(glyph_count=97, bitmap_size=2988))

    def test_layout(self):
        info = read_bitmap_info(self.reference_pcf, self.tables)
        layout = read_layout(self.reference_pcf, self.tables, info)
        self.assertEqual(layout, GlyphLayout(
            indices_offset=5406,
            bitmap_offsets_offset=2000,
            first_bitmap_offset=2404,
            glyph_count=97,
            is_metrics_compressed=True,
            first_metric_offset=1506,
            metrics_size=5,
            metrics_count=97,
        ))

    def test_uncompressed_layout(self):
        data = build_reference_font(compressed=False, table_sizes={})
        tables = read_tables(data)
        info = read_bitmap_info(data, tables)
        layout = read_layout(data, tables, info)
        self.assertFalse(layout.is_metrics_compressed)
        self.assertEqual(layout.metrics_size, 12)
        self.assertEqual(layout.first_metric_offset, tables[4].offset + 8)


class TestGlyphAssembly(BaseTester):
    """Test index resolution, metrics and bitmap extraction."""

    def setUp(self):
        super().setUp()
        self.tables = read_tables(self.reference_pcf)
        self.encoding = read_encoding(self.reference_pcf, self.tables)
        info = read_bitmap_info(self.reference_pcf, self.tables)
        self.layout = read_layout(self.reference_pcf, self.tables, info)

    def _index(self, code_point):
        return read_glyph_index(
            self.reference_pcf, self.layout.indices_offset,
            self.encoding, code_point
        )

    def test_glyph_indices(self):
        self.assertEqual(self._index(65), 35)
        self.assertEqual(self._index(74), 44)
        self.assertEqual(self._index(87), 57)

    def test_undefined_code_point(self):
        # 2..31 are not in the font
        self.assertIsNone(self._index(2))
        self.assertIsNone(self._index(31))

    def test_out_of_range_code_point(self):
        # high byte outside range must not wrap to the first row
        self.assertIsNone(self._index(0x141))
        self.assertIsNone(self._index(0x100))
        # low byte above max_byte2
        self.assertIsNone(self._index(127))
        self.assertIsNone(self._index(0x10041))
        self.assertIsNone(self._index(-1))

    def test_encoding_index(self):
        encoding = Encoding(0x20, 0x7e, 1, 2, 0)
        self.assertEqual(encoding_index(encoding, 0x120), 0)
        self.assertEqual(encoding_index(encoding, 0x221), 96)
        self.assertIsNone(encoding_index(encoding, 0x41))
        self.assertIsNone(encoding_index(encoding, 0x31f))

    def test_compressed_metrics(self):
        metrics = read_glyph_metrics(self.reference_pcf, self.layout, 35)
        self.assertEqual(metrics, Metrics(0, 7, 8, 9, 0, 0))
        metrics = read_glyph_metrics(self.reference_pcf, self.layout, 44)
        self.assertEqual(metrics, Metrics(-1, 3, 4, 7, 1, 0))

    def test_bitmap_offset(self):
        self.assertEqual(read_bitmap_offset(self.reference_pcf, self.layout, 35), 960)

    def test_iter_encoded(self):
        pairs = list(iter_encoded(self.reference_pcf, self.tables, self.encoding))
        self.assertEqual(len(pairs), 97)
        self.assertEqual(pairs[:3], [(0, 0), (1, 1), (32, 2)])
        self.assertIn((65, 35), pairs)

    def test_uppercase_a(self):
        font = decode_pcf(self.reference_pcf, [65])
        expected = Glyph(
            (
                0, 0, 0, 1, 0, 0, 0,
                0, 0, 0, 1, 1, 0, 0,
                0, 0, 1, 0, 1, 0, 0,
                0, 0, 1, 0, 0, 1, 0,
                0, 0, 1, 0, 0, 1, 0,
                0, 1, 1, 1, 1, 1, 0,
                0, 1, 0, 0, 0, 0, 1,
                0, 1, 0, 0, 0, 0, 1,
                1, 0, 0, 0, 0, 0, 1,
            ),
            code_point=65,
            encoding='A',
            bounding_box=BoundingBox(size=Coord(7, 9), offset=Coord(0, 0)),
            shift_x=8,
            shift_y=0,
            tile_index=0,
        )
        self.assertEqual(font.glyphs[65], expected)
        self.assertEqual(font.glyphs[65].as_text(), self.reference_A)

    def test_descender_and_negative_bearing(self):
        font = decode_pcf(self.reference_pcf, 'J')
        glyph = font.glyphs[74]
        self.assertEqual(glyph.bounding_box, BoundingBox((4, 8), (-1, -1)))
        self.assertEqual(glyph.shift_x, 4)
        self.assertEqual(glyph.as_text(ink='@', paper='.').splitlines()[-1], '.@@.')

    def test_wide_glyph(self):
        font = decode_pcf(self.reference_pcf, 'W')
        glyph = font.glyphs[87]
        self.assertEqual(glyph.width, 11)
        self.assertEqual(glyph.height, 8)
        self.assertEqual(glyph.as_text().splitlines()[0], '@....@....@')

    def test_multi_word_rows(self):
        row = '@' + '.' * 32 + '@'
        data = build_pcf([GlyphSpec(0x2588, (0, 34, 34, 2, 0), (row, row[::-1]))])
        glyph = decode_pcf(data).glyphs[0x2588]
        self.assertEqual(glyph.as_text(), row + '\n' + row + '\n')

    def test_zero_width_glyph(self):
        data = build_pcf([
            GlyphSpec(0x20, (0, 0, 4, 8, 1), ('',) * 9),
            GlyphSpec(0x41, (0, 1, 2, 1, 0), ('@',)),
        ])
        font = decode_pcf(data)
        space = font.glyphs[0x20]
        self.assertEqual(space.width, 0)
        self.assertEqual(space.height, 9)
        self.assertEqual(space.bitmap, ())
        self.assertEqual(space.shift_x, 4)
        self.assertEqual(font.get_glyph('A').as_text(), '@\n')

    def test_two_byte_encoding(self):
        glyphs = [
            GlyphSpec(0x141, (0, 2, 3, 1, 0), ('@.',)),
            GlyphSpec(0x241, (0, 2, 3, 1, 0), ('.@',)),
        ]
        font = decode_pcf(build_pcf(glyphs))
        self.assertEqual(sorted(font.glyphs), [0x141, 0x241])
        self.assertEqual(font.get_glyph('Ɂ').as_text(), '.@\n')

    def test_uncompressed_metrics(self):
        compressed = decode_pcf(self.reference_pcf)
        uncompressed = decode_pcf(
            build_reference_font(compressed=False, table_sizes={})
        )
        self.assertEqual(uncompressed.glyph_list, compressed.glyph_list)


class TestDecode(BaseTester):
    """Test decoding whole fonts."""

    def test_decode_all(self):
        font = decode_pcf(self.reference_pcf)
        self.assertEqual(len(font.glyphs), 97)
        self.assertEqual(font.glyph_list[0].code_point, 0)
        self.assertEqual(font.glyph_list[-1].code_point, 126)

    def test_decode_selection(self):
        font = decode_pcf(self.reference_pcf, 'AJW')
        self.assertEqual(tuple(font.glyphs), (65, 74, 87))
        font = decode_pcf(self.reference_pcf, [65, 65, 0x141, 0x10041])
        self.assertEqual(tuple(font.glyphs), (65,))

    def test_decode_selection_rejects_strings(self):
        with self.assertRaises(ValueError):
            decode_pcf(self.reference_pcf, ['AB'])

    def test_idempotent(self):
        self.assertEqual(decode_pcf(self.reference_pcf), decode_pcf(self.reference_pcf))

    def test_decode_bytearray(self):
        self.assertEqual(
            decode_pcf(bytearray(self.reference_pcf), 'A'),
            decode_pcf(self.reference_pcf, 'A'),
        )

    def test_load_stream(self):
        font = pcfont.load(io.BytesIO(self.reference_pcf), 'A')
        self.assertEqual(font.get_glyph('A').as_text(), self.reference_A)


if __name__ == '__main__':
    unittest.main()
