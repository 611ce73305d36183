"""
pcfont - decode PCF bitmap fonts and draw text with them

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import sys as _sys
assert _sys.version_info >= (3, 9)

from pathlib import Path

from .constants import VERSION as __version__
from .errors import (
    FileFormatError, InvalidHeader, MissingTable, UnsupportedFormat,
    UnsupportedEndianness, UnsupportedPadding, UnsupportedMetricsForm,
    OutOfBounds, InvalidGeometry,
)
from .basetypes import Coord, BoundingBox, Rectangle
from .glyph import Glyph
from .font import PcfFont
from .pcf import decode_pcf, load_pcf
from .pack import pack_font, PackedFont, PackedGlyph, CharacterRanges
from .renderer import render, measure_string


def load(infile, code_points=None):
    """
    Load a PCF font from a file.

    infile: path or binary stream
    code_points: code points or characters to decode (default: all)
    """
    if isinstance(infile, (str, Path)):
        with open(infile, 'rb') as instream:
            return load_pcf(instream, code_points)
    return load_pcf(infile, code_points)
