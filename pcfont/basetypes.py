"""
pcfont.basetypes - base data types and converters

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

from collections import namedtuple
from numbers import Real


def to_int(int_str):
    """Convert from int-like or string in any representation."""
    if isinstance(int_str, int):
        return int_str
    try:
        # '0xFF' - hex
        # '0o77' - octal
        # '99' - decimal
        return int(int_str, 0)
    except (TypeError, ValueError):
        # '099' - ValueError above, OK as decimal
        # non-string inputs: TypeError, may be OK if int(x) works
        return int(int_str)


class _VectorMixin:
    """Vector operations on tuple."""

    def __str__(self):
        return ' '.join(f'{_e}' for _e in self)

    def __add__(self, other):
        return type(self)(*(_l + _r for _l, _r in zip(self, other)))

    def __sub__(self, other):
        return type(self)(*(_l - _r for _l, _r in zip(self, other)))

    def __bool__(self):
        return any(self)


class Coord(_VectorMixin, namedtuple('Coord', 'x y')):
    """Coordinate tuple."""

    def __str__(self):
        return 'x'.join(str(_x) for _x in self)

    @classmethod
    def create(cls, coord=0):
        coord = to_tuple(coord, length=2)
        return cls(*coord)


class RGB(_VectorMixin, namedtuple('RGB', 'r g b')):
    """Colour tuple."""

    @classmethod
    def create(cls, coord=0):
        coord = to_tuple(coord, length=3)
        return cls(*coord)


class BoundingBox(namedtuple('BoundingBox', 'size offset')):
    """
    Rectangle in baseline-relative, y-up coordinates.

    size: width and height
    offset: position of the bottom left corner relative to the origin
    """

    def __new__(cls, size=Coord(0, 0), offset=Coord(0, 0)):
        return super().__new__(cls, Coord(*size), Coord(*offset))


class Rectangle(namedtuple('Rectangle', 'top_left size')):
    """Rectangle in top-left-origin, y-down raster coordinates."""

    def __new__(cls, top_left=Coord(0, 0), size=Coord(0, 0)):
        return super().__new__(cls, Coord(*top_left), Coord(*size))

    @classmethod
    def from_bounding_box(cls, bounding_box):
        """Convert a baseline-relative bounding box to raster coordinates."""
        size, offset = bounding_box
        return cls(
            Coord(offset.x, -offset.y - size.y - 1),
            size,
        )

    def translate(self, by):
        """Shift the rectangle by a displacement vector."""
        return type(self)(self.top_left + Coord(*by), self.size)

    def points(self):
        """Iterate over all points inside the rectangle in row-major order."""
        left, top = self.top_left
        return (
            Coord(left + _x, top + _y)
            for _y in range(self.size.y)
            for _x in range(self.size.x)
        )


def _str_to_tuple(value):
    """Convert various string representations to tuple."""
    value = value.strip().replace(',', ' ').replace('x', ' ')
    return tuple(to_int(_s) for _s in value.split())

def to_tuple(value=0, *, length=2):
    if isinstance(value, tuple):
        return tuple(to_int(_i) for _i in value)
    if isinstance(value, Real):
        return (value,) * length
    if isinstance(value, str):
        value = _str_to_tuple(value)
        if len(value) == 1:
            return value * length
        return value
    if not value:
        return (0,) * length
    return tuple(value)
