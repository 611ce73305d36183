"""
pcfont.pcf - X11 portable compiled format decoder

(c) 2023--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
from collections import namedtuple

from .struct import big_endian as be, little_endian as le
from .binary import ceildiv, bytes_to_bits
from .basetypes import Coord, BoundingBox
from .glyph import Glyph, code_point_to_char
from .font import PcfFont
from .errors import (
    InvalidHeader, MissingTable, UnsupportedFormat, UnsupportedEndianness,
    UnsupportedPadding, UnsupportedMetricsForm, OutOfBounds, InvalidGeometry,
)


MAGIC = b'\1fcp'
# 1885562369
PCF_MAGIC = int.from_bytes(MAGIC, 'little')


##############################################################################
# https://fontforge.org/docs/techref/pcf-format.html

_HEADER = le.Struct(
    # /* always "\1fcp" */
    header='uint32',
    table_count='int32',
)

# fontforge recap has these as apparent signed ints,
# but X sources say CARD32 which is an unsigned int
_TOC_ENTRY = le.Struct(
    # /* See below, indicates which table */
    type='int32',
    # /* See below, indicates how the data are formatted in the table */
    format='int32',
    # /* In bytes */
    size='int32',
    # /* from start of file */
    offset='uint32',
)

# format field
#define PCF_DEFAULT_FORMAT       0x00000000
PCF_DEFAULT_FORMAT = 0x00000000
#define PCF_INKBOUNDS           0x00000200
PCF_INKBOUNDS = 0x00000200
#define PCF_ACCEL_W_INKBOUNDS   0x00000100
PCF_ACCEL_W_INKBOUNDS = 0x00000100
#define PCF_COMPRESSED_METRICS  0x00000100
PCF_COMPRESSED_METRICS = 0x00000100
#define PCF_FORMAT_MASK         0xffffff00
PCF_FORMAT_MASK = 0xffffff00

# format field modifiers
#define PCF_GLYPH_PAD_MASK       (3<<0)            /* See the bitmap table for explanation */
PCF_GLYPH_PAD_MASK = (3<<0)
#define PCF_BYTE_MASK           (1<<2)            /* If set then Most Sig Byte First */
PCF_BYTE_MASK = (1<<2)
#define PCF_BIT_MASK            (1<<3)            /* If set then Most Sig Bit First */
PCF_BIT_MASK = (1<<3)
#define PCF_SCAN_UNIT_MASK      (3<<4)            /* See the bitmap table for explanation */
PCF_SCAN_UNIT_MASK = (3<<4)

# type field
#define PCF_PROPERTIES               (1<<0)
PCF_PROPERTIES = (1<<0)
#define PCF_ACCELERATORS            (1<<1)
PCF_ACCELERATORS = (1<<1)
#define PCF_METRICS                 (1<<2)
PCF_METRICS = (1<<2)
#define PCF_BITMAPS                 (1<<3)
PCF_BITMAPS = (1<<3)
#define PCF_INK_METRICS             (1<<4)
PCF_INK_METRICS = (1<<4)
#define PCF_BDF_ENCODINGS           (1<<5)
PCF_BDF_ENCODINGS = (1<<5)
#define PCF_SWIDTHS                 (1<<6)
PCF_SWIDTHS = (1<<6)
#define PCF_GLYPH_NAMES             (1<<7)
PCF_GLYPH_NAMES = (1<<7)
#define PCF_BDF_ACCELERATORS        (1<<8)
PCF_BDF_ACCELERATORS = (1<<8)

TABLE_NAMES = {
    PCF_PROPERTIES: 'properties',
    PCF_ACCELERATORS: 'accelerators',
    PCF_METRICS: 'metrics',
    PCF_BITMAPS: 'bitmaps',
    PCF_INK_METRICS: 'ink metrics',
    PCF_BDF_ENCODINGS: 'encodings',
    PCF_SWIDTHS: 'scalable widths',
    PCF_GLYPH_NAMES: 'glyph names',
    PCF_BDF_ACCELERATORS: 'BDF accelerators',
}

# glyph index value in the encoding table for undefined code points
NO_GLYPH = 0xffff

# highest code point addressable through the two-byte encoding table
MAX_CODE_POINT = 0xffff

# the only supported glyph padding: rows are padded to 32-bit words
# /*  0=>bytes, 1=>shorts, 2=>ints */
_PAD_INTS = 2


##############################################################################
# decoded structures

TableDescriptor = namedtuple('TableDescriptor', 'format size offset')

# from https://tronche.com/gui/x/xlib/graphics/font-metrics/#XCharStruct
# typedef struct {
# 	short lbearing;			/* origin to left edge of raster */
# 	short rbearing;			/* origin to right edge of raster */
# 	short width;			/* advance to next char's origin */
# 	short ascent;			/* baseline to top edge of raster */
# 	short descent;			/* baseline to bottom edge of raster */
# 	unsigned short attributes;	/* per char flags (not predefined) */
# } XCharStruct;
Metrics = namedtuple('Metrics', (
    'left_side_bearing', 'right_side_bearing', 'character_width',
    'character_ascent', 'character_descent', 'character_attributes',
))

Accelerators = namedtuple('Accelerators', (
    'no_overlap', 'constant_metrics', 'terminal_font', 'constant_width',
    'ink_inside', 'ink_metrics', 'draw_direction', 'padding',
    'font_ascent', 'font_descent', 'max_overlap',
    'minbounds', 'maxbounds', 'ink_minbounds', 'ink_maxbounds',
))

Encoding = namedtuple('Encoding', (
    'min_byte2', 'max_byte2', 'min_byte1', 'max_byte1', 'default_char',
))

BitmapTableInfo = namedtuple('BitmapTableInfo', 'glyph_count bitmap_size')

# absolute offsets of the per-glyph arrays, derived once from the table directory
GlyphLayout = namedtuple('GlyphLayout', (
    'indices_offset', 'bitmap_offsets_offset', 'first_bitmap_offset',
    'glyph_count', 'is_metrics_compressed', 'first_metric_offset',
    'metrics_size', 'metrics_count',
))


##############################################################################
# on-disk structures

_UNCOMPRESSED_METRICS = be.Struct(
    left_side_bearing='int16',
    right_side_bearing='int16',
    character_width='int16',
    character_ascent='int16',
    character_descent='int16',
    character_attributes='uint16',
)

# The (compressed) bytes are unsigned bytes which are offset by 0x80
# (so the actual value will be (getc(pcf_file)-0x80). :
_COMPRESSED_METRICS = be.Struct(
    left_side_bearing='uint8',
    right_side_bearing='uint8',
    character_width='uint8',
    character_ascent='uint8',
    character_descent='uint8',
)

# Accelerator table, after the format word
_ACC_TABLE = be.Struct(
    no_overlap='uint8',
    constant_metrics='uint8',
    terminal_font='uint8',
    constant_width='uint8',
    ink_inside='uint8',
    ink_metrics='uint8',
    draw_direction='uint8',
    padding='uint8',
    font_ascent='int32',
    font_descent='int32',
    max_overlap='int32',
    # minimum and maximum value for each metric
    #minbounds=_UNCOMPRESSED_METRICS,
    #maxbounds=_UNCOMPRESSED_METRICS,
    # if format PCF_ACCEL_W_INKBOUNDS:
    # maximum and maximum value for each ink metric
    ##ink_minbounds=_UNCOMPRESSED_METRICS,
    ##ink_maxbounds=_UNCOMPRESSED_METRICS,
)

# FontForge docs have the encoding table as signed integers
_ENCODING_TABLE = be.Struct(
    min_byte2='int16',
    max_byte2='int16',
    min_byte1='int16',
    max_byte1='int16',
    default_char='int16',
)

# format word, glyph count, and four bitmap size totals
_BITMAP_HEADER_WORDS = 6


##############################################################################
# table directory

def read_header(data):
    """Read and check the file header. Returns (magic, table_count)."""
    header = _HEADER.read_from(data, 0)
    if header.header != PCF_MAGIC:
        raise InvalidHeader(
            f'Not a PCF file: signature {header.header:#010x}, '
            f'expected {PCF_MAGIC:#010x}.'
        )
    if header.table_count < 0:
        raise InvalidHeader(f'Negative table count {header.table_count}.')
    return header.header, header.table_count


def read_tables(data):
    """Read the table directory into a mapping from type flag to descriptor."""
    _, table_count = read_header(data)
    toc = (_TOC_ENTRY * table_count).read_from(data, _HEADER.size)
    tables = {}
    for entry in toc:
        if entry.type in tables:
            logging.warning(
                'Duplicate %s table in PCF directory; using the last one.',
                TABLE_NAMES.get(entry.type, entry.type)
            )
        tables[entry.type] = TableDescriptor(
            entry.format, entry.size, entry.offset
        )
        logging.debug(
            'PCF %s table: format %#x, size %d, offset %d',
            TABLE_NAMES.get(entry.type, entry.type),
            entry.format, entry.size, entry.offset
        )
    return tables


def get_table(tables, *table_types):
    """Get the first of the given tables that is present."""
    for table_type in table_types:
        try:
            return tables[table_type]
        except KeyError:
            pass
    raise MissingTable(
        'No {} table found in PCF file.'.format(
            ' or '.join(TABLE_NAMES[_t] for _t in table_types)
        )
    )


def _read_format(data, table, name):
    """Read the format word at start of a table; require big-endian body."""
    format = le.uint32.read_int(data, table.offset)
    if not format & PCF_BYTE_MASK:
        raise UnsupportedEndianness(
            f'PCF {name} table is little-endian; only big-endian is supported.'
        )
    return format


def _require_default_format(format, name):
    if format & PCF_FORMAT_MASK != PCF_DEFAULT_FORMAT:
        raise UnsupportedFormat(
            f'PCF {name} table has unsupported format {format:#x}.'
        )


##############################################################################
# accelerators

def read_metrics_record(data, offset):
    """Read uncompressed metrics (12 bytes) at the given offset."""
    return Metrics(**vars(_UNCOMPRESSED_METRICS.read_from(data, offset)))


def read_compressed_metrics_record(data, offset):
    """Read compressed metrics (5 bytes) at the given offset."""
    raw = _COMPRESSED_METRICS.read_from(data, offset)
    # adjust unsigned bytes by 0x80 offset
    return Metrics(
        **{_k: _v - 0x80 for _k, _v in vars(raw).items()},
        character_attributes=0,
    )


def read_accelerators(data, tables):
    """Read the BDF Accelerator table, or the Accelerator table if absent."""
    table = get_table(tables, PCF_BDF_ACCELERATORS, PCF_ACCELERATORS)
    format = _read_format(data, table, 'accelerators')
    offset = table.offset + le.uint32.size
    acc_table = _ACC_TABLE.read_from(data, offset)
    offset += _ACC_TABLE.size
    minbounds = read_metrics_record(data, offset)
    maxbounds = read_metrics_record(data, offset + _UNCOMPRESSED_METRICS.size)
    offset += 2 * _UNCOMPRESSED_METRICS.size
    if format & PCF_ACCEL_W_INKBOUNDS:
        ink_minbounds = read_metrics_record(data, offset)
        ink_maxbounds = read_metrics_record(
            data, offset + _UNCOMPRESSED_METRICS.size
        )
    else:
        ink_minbounds, ink_maxbounds = minbounds, maxbounds
    return Accelerators(
        **vars(acc_table),
        minbounds=minbounds,
        maxbounds=maxbounds,
        ink_minbounds=ink_minbounds,
        ink_maxbounds=ink_maxbounds,
    )


##############################################################################
# encoding

def read_encoding(data, tables):
    """Read the BDF encodings table header."""
    table = get_table(tables, PCF_BDF_ENCODINGS)
    format = _read_format(data, table, 'encodings')
    _require_default_format(format, 'encodings')
    enc = _ENCODING_TABLE.read_from(data, table.offset + le.uint32.size)
    return Encoding(**vars(enc))


def _indices_offset(tables):
    """Offset of the glyph index array in the encodings table."""
    return (
        get_table(tables, PCF_BDF_ENCODINGS).offset
        + le.uint32.size + _ENCODING_TABLE.size
    )


def encoding_index(encoding, code_point):
    """Position of a code point in the glyph index array, or None if out of range."""
    if not 0 <= code_point <= MAX_CODE_POINT:
        return None
    enc1 = (code_point >> 8) & 0xff
    enc2 = code_point & 0xff
    if not encoding.min_byte1 <= enc1 <= encoding.max_byte1:
        return None
    if not encoding.min_byte2 <= enc2 <= encoding.max_byte2:
        return None
    return (
        (enc1 - encoding.min_byte1)
        * (encoding.max_byte2 - encoding.min_byte2 + 1)
        + enc2 - encoding.min_byte2
    )


def read_glyph_index(data, indices_offset, encoding, code_point):
    """Glyph index for a code point, or None if the font does not define it."""
    encoding_idx = encoding_index(encoding, code_point)
    if encoding_idx is None:
        return None
    glyph_idx = be.uint16.read_int(data, indices_offset + 2 * encoding_idx)
    if glyph_idx == NO_GLYPH:
        return None
    return glyph_idx


def iter_encoded(data, tables, encoding):
    """Generate (code_point, glyph_index) for all defined code points."""
    if (
            encoding.max_byte1 < encoding.min_byte1
            or encoding.max_byte2 < encoding.min_byte2
        ):
        return
    row_size = encoding.max_byte2 - encoding.min_byte2 + 1
    count = (encoding.max_byte1 - encoding.min_byte1 + 1) * row_size
    indices = (be.uint16 * count).read_from(data, _indices_offset(tables))
    for encoding_idx, glyph_idx in enumerate(indices):
        if glyph_idx == NO_GLYPH:
            continue
        enc1 = encoding.min_byte1 + encoding_idx // row_size
        enc2 = encoding.min_byte2 + encoding_idx % row_size
        yield (enc1 << 8) | enc2, glyph_idx


##############################################################################
# bitmaps

def read_bitmap_info(data, tables):
    """Read glyph count and selected bitmap data size from the Bitmaps table."""
    table = get_table(tables, PCF_BITMAPS)
    format = _read_format(data, table, 'bitmaps')
    _require_default_format(format, 'bitmaps')
    if not format & PCF_BIT_MASK:
        raise UnsupportedFormat(
            'PCF bitmaps are least-significant bit first; '
            'only most-significant bit first is supported.'
        )
    # /* how each row in each glyph's bitmap is padded (format&3) */
    # /*  0=>bytes, 1=>shorts, 2=>ints */
    glyph_pad = format & PCF_GLYPH_PAD_MASK
    if glyph_pad != _PAD_INTS:
        raise UnsupportedPadding(
            f'PCF bitmap rows are padded to {2**glyph_pad} bytes; '
            'only 4-byte padding is supported.'
        )
    offset = table.offset + le.uint32.size
    glyph_count = be.int32.read_int(data, offset)
    if glyph_count < 0:
        raise InvalidGeometry(f'Negative glyph count {glyph_count}.')
    # skip the glyph bitmap offsets, consumed by the glyph assembler
    offset += be.int32.size * (1 + glyph_count)
    bitmap_sizes = (be.int32 * 4).read_from(data, offset)
    bitmap_size = bitmap_sizes[glyph_pad]
    data_size = be.int32.size * (_BITMAP_HEADER_WORDS + glyph_count) + bitmap_size
    if data_size > table.size:
        logging.warning(
            'PCF bitmap data (%d bytes) exceeds bitmaps table size (%d bytes).',
            data_size, table.size
        )
    return BitmapTableInfo(glyph_count, bitmap_size)


##############################################################################
# metrics

def read_layout(data, tables, bitmap_info):
    """Locate the per-glyph arrays of the metrics, bitmaps and encodings tables."""
    metrics_table = get_table(tables, PCF_METRICS)
    bitmaps_table = get_table(tables, PCF_BITMAPS)
    format = _read_format(data, metrics_table, 'metrics')
    form = format & PCF_FORMAT_MASK
    if form == PCF_COMPRESSED_METRICS:
        # documented as signed int, but unsigned it makes more sense
        # also this is used as uint by bdftopcf for e.g. unifont
        count_type, metrics_size = be.uint16, _COMPRESSED_METRICS.size
    elif form == PCF_DEFAULT_FORMAT:
        count_type, metrics_size = be.uint32, _UNCOMPRESSED_METRICS.size
    else:
        raise UnsupportedMetricsForm(
            f'PCF metrics table has unsupported format {format:#x}.'
        )
    count_offset = metrics_table.offset + le.uint32.size
    metrics_count = count_type.read_int(data, count_offset)
    if metrics_count != bitmap_info.glyph_count:
        logging.warning(
            'PCF metrics table has %d entries, bitmaps table has %d.',
            metrics_count, bitmap_info.glyph_count
        )
    return GlyphLayout(
        indices_offset=_indices_offset(tables),
        bitmap_offsets_offset=bitmaps_table.offset + 2 * be.int32.size,
        first_bitmap_offset=(
            bitmaps_table.offset
            + be.int32.size * (_BITMAP_HEADER_WORDS + bitmap_info.glyph_count)
        ),
        glyph_count=bitmap_info.glyph_count,
        is_metrics_compressed=form == PCF_COMPRESSED_METRICS,
        first_metric_offset=count_offset + count_type.size,
        metrics_size=metrics_size,
        metrics_count=metrics_count,
    )


def read_glyph_metrics(data, layout, index):
    """Read the metrics of the glyph at the given index."""
    if not 0 <= index < layout.metrics_count:
        raise OutOfBounds(
            f'Glyph index {index} exceeds metrics count {layout.metrics_count}.'
        )
    offset = layout.first_metric_offset + layout.metrics_size * index
    if layout.is_metrics_compressed:
        return read_compressed_metrics_record(data, offset)
    return read_metrics_record(data, offset)


##############################################################################
# glyph assembly

def read_bitmap_offset(data, layout, index):
    """Read the offset of a glyph's bitmap relative to the bitmap data."""
    if not 0 <= index < layout.glyph_count:
        raise OutOfBounds(
            f'Glyph index {index} exceeds glyph count {layout.glyph_count}.'
        )
    return be.uint32.read_int(data, layout.bitmap_offsets_offset + 4 * index)


def unpack_bitmap(data, offset, width, height):
    """
    Extract a glyph bitmap with rows padded to 32-bit words, msb first.
    Returns a row-major tuple of 0 and 1 values.
    """
    stride = 4 * ceildiv(width, 32)
    end = offset + stride * height
    if offset < 0 or end > len(data):
        raise OutOfBounds(
            f'Glyph bitmap at {offset}..{end} exceeds buffer of {len(data)} bytes.'
        )
    if not stride:
        return ()
    return tuple(
        int(_bit)
        for _row in range(offset, end, stride)
        for _bit in bytes_to_bits(data[_row:_row+stride], width)
    )


def read_glyph(data, layout, code_point, index):
    """Assemble the glyph at the given index."""
    metrics = read_glyph_metrics(data, layout, index)
    width = metrics.right_side_bearing - metrics.left_side_bearing
    height = metrics.character_ascent + metrics.character_descent
    if width < 0 or height < 0:
        raise InvalidGeometry(
            f'Glyph {code_point:#06x} has negative dimensions {width}x{height}.'
        )
    offset = layout.first_bitmap_offset + read_bitmap_offset(data, layout, index)
    return Glyph(
        unpack_bitmap(data, offset, width, height),
        code_point=code_point,
        encoding=code_point_to_char(code_point),
        bounding_box=BoundingBox(
            size=Coord(width, height),
            offset=Coord(metrics.left_side_bearing, -metrics.character_descent),
        ),
        shift_x=metrics.character_width,
        # vertical advance and multi-tile glyphs are not supported
        shift_y=0,
        tile_index=0,
    )


def _to_code_points(code_points):
    """Normalise a str or iterable of int/str to a sorted tuple of int."""
    if isinstance(code_points, str):
        code_points = (ord(_c) for _c in code_points)
    return tuple(sorted(set(_to_code_point(_cp) for _cp in code_points)))


def _to_code_point(item):
    if isinstance(item, str):
        if len(item) != 1:
            raise ValueError(f'Expected a single character, got {item!r}.')
        return ord(item)
    return int(item)


def load_glyphs(data, tables, encoding, layout, code_points=None):
    """
    Assemble glyphs for the given code points, skipping those not in the font.
    If code_points is None, load every code point the encoding table defines.
    """
    if code_points is None:
        indices = iter_encoded(data, tables, encoding)
    else:
        indices = (
            (_cp, read_glyph_index(data, layout.indices_offset, encoding, _cp))
            for _cp in _to_code_points(code_points)
        )
    glyphs = tuple(
        read_glyph(data, layout, _cp, _index)
        for _cp, _index in indices
        if _index is not None
    )
    logging.debug('Assembled %d PCF glyphs.', len(glyphs))
    return glyphs


##############################################################################
# font

def get_bounding_box(accelerators):
    """Font bounding box from the ink bounds."""
    minbounds = accelerators.ink_minbounds
    maxbounds = accelerators.ink_maxbounds
    return BoundingBox(
        size=Coord(
            maxbounds.right_side_bearing - minbounds.left_side_bearing,
            maxbounds.character_ascent + maxbounds.character_descent,
        ),
        offset=Coord(
            minbounds.left_side_bearing, -maxbounds.character_descent
        ),
    )


def decode_pcf(data, code_points=None):
    """
    Decode a PCF font from a bytes-like buffer.

    code_points: iterable of int code points or str of characters to decode
        (default: all glyphs in the font)
    """
    data = bytes(data)
    tables = read_tables(data)
    accelerators = read_accelerators(data, tables)
    encoding = read_encoding(data, tables)
    bitmap_info = read_bitmap_info(data, tables)
    layout = read_layout(data, tables, bitmap_info)
    glyphs = load_glyphs(data, tables, encoding, layout, code_points)
    return PcfFont(
        glyphs,
        bounding_box=get_bounding_box(accelerators),
        accelerators=accelerators,
        encoding=encoding,
        bitmap_info=bitmap_info,
        tables=tables,
    )


def load_pcf(instream, code_points=None):
    """Load font from X11 Portable Compiled Format (PCF)."""
    return decode_pcf(instream.read(), code_points)
