"""
pcfont.raster - bitmap raster

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


class blockstr(str):
    """str that is shown as block text in interactive session."""
    def __repr__(self):
        return f'"""\\\n{self}"""'


# immutable bit matrix

class Raster:
    """Bit matrix, stored row-major as a flat tuple of 0 and 1 values."""

    def __init__(self, pixels=(), *, width=0):
        """Create raster from a flat sequence of pixels and a row width."""
        self._pixels = tuple(1 if _bit else 0 for _bit in pixels)
        self._width = width
        if width < 0:
            raise ValueError(f'Raster width must not be negative: {width}')
        if (
                (self._pixels and not width)
                or (width and len(self._pixels) % width)
            ):
            raise ValueError(
                f'Pixel count {len(self._pixels)} is not a multiple '
                f'of raster width {width}.'
            )

    def __bool__(self):
        return bool(self.height and self.width)

    def __eq__(self, other):
        if not isinstance(other, Raster):
            return NotImplemented
        return self.width == other.width and self._pixels == other._pixels

    def __hash__(self):
        return hash((self._width, self._pixels))

    @property
    def width(self):
        """Raster width."""
        return self._width

    @property
    def height(self):
        """Raster height."""
        if not self._width:
            return 0
        return len(self._pixels) // self._width

    @property
    def pixels(self):
        """Flat row-major tuple of pixels."""
        return self._pixels

    def pixel(self, x, y):
        """Pixel is inked."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f'Pixel ({x}, {y}) outside {self.width}x{self.height} raster.'
            )
        return bool(self._pixels[y * self._width + x])


    ##########################################################################
    # representation

    def __repr__(self):
        """Text representation."""
        if self.height:
            return '{}(({}))'.format(
                type(self).__name__,
                self.as_text(start="\n  '", end="',")
            )
        return '{}(width={})'.format(
            type(self).__name__,
            self.width,
        )


    ##########################################################################
    # conversion

    def as_matrix(self, *, ink=1, paper=0):
        """Return matrix of user-specified foreground and background objects."""
        return tuple(
            tuple(
                ink if _c else paper
                for _c in self._pixels[_y*self._width:(_y+1)*self._width]
            )
            for _y in range(self.height)
        )

    def as_text(self, *, ink='@', paper='.', start='', end='\n'):
        """Convert raster to text."""
        if not self.height:
            return ''
        contents = ''.join(
            ''.join((start, *_row, end))
            for _row in self.as_matrix(ink=ink, paper=paper)
        )
        return blockstr(contents)
