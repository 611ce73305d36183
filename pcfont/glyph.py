"""
pcfont.glyph - decoded glyph record

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

from .raster import Raster
from .basetypes import Coord, BoundingBox


def code_point_to_char(code_point):
    """Unicode character for a code point, or None if it is not a scalar value."""
    if 0 <= code_point <= 0x10ffff and not (0xd800 <= code_point <= 0xdfff):
        return chr(code_point)
    return None


class Glyph(Raster):
    """
    Glyph decoded from a PCF font: a raster with placement metrics.

    The raster holds one value (0 or 1) per pixel, row-major, top row first.
    """

    def __init__(
            self, bitmap=(), *,
            code_point, bounding_box,
            encoding=None, shift_x=0, shift_y=0, tile_index=0,
        ):
        bounding_box = BoundingBox(*bounding_box)
        super().__init__(bitmap, width=bounding_box.size.x)
        if len(self.pixels) != bounding_box.size.x * bounding_box.size.y:
            raise ValueError(
                f'Bitmap of {len(self.pixels)} pixels does not match '
                f'bounding box size {bounding_box.size}.'
            )
        self._code_point = code_point
        self._encoding = encoding
        self._bounding_box = bounding_box
        self._shift_x = shift_x
        self._shift_y = shift_y
        self._tile_index = tile_index

    @property
    def code_point(self):
        return self._code_point

    @property
    def encoding(self):
        """Character the glyph represents, if any."""
        return self._encoding

    @property
    def bitmap(self):
        return self.pixels

    @property
    def bounding_box(self):
        return self._bounding_box

    @property
    def height(self):
        # zero-width glyphs keep their declared height
        return self._bounding_box.size.y

    @property
    def shift_x(self):
        """Horizontal advance."""
        return self._shift_x

    @property
    def shift_y(self):
        """Vertical advance."""
        return self._shift_y

    @property
    def tile_index(self):
        return self._tile_index

    @property
    def offset(self):
        """Bottom left of the raster relative to the origin."""
        return Coord(*self._bounding_box.offset)

    def _key(self):
        return (
            self._code_point, self._encoding, self.pixels, self._bounding_box,
            self._shift_x, self._shift_y, self._tile_index
        )

    def __eq__(self, other):
        if not isinstance(other, Glyph):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return '{}(code_point={}, encoding={!r}, bounding_box={}, shift_x={}, bitmap=({}))'.format(
            type(self).__name__,
            self._code_point, self._encoding,
            tuple(self._bounding_box), self._shift_x,
            self.as_text(start="\n  '", end="',"),
        )
