"""
pcfont.canvas - bitmap drawing operations

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


try:
    from PIL import Image
except ImportError:
    Image = None

from .raster import blockstr


# canvas pixel values
BORDER = -1
PAPER = 0
INK = 1


class Canvas:
    """Mutable pixel grid in top-left-origin raster coordinates."""

    def __init__(self, pixels):
        self._pixels = [list(_row) for _row in pixels]

    @classmethod
    def blank(cls, width, height, fill=PAPER):
        """Create a canvas in background colour."""
        return cls([fill]*width for _ in range(height))

    @property
    def width(self):
        if not self._pixels:
            return 0
        return len(self._pixels[0])

    @property
    def height(self):
        return len(self._pixels)

    def draw_pixel(self, x, y, value=INK):
        """Draw a pixel; points outside the canvas are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[y][x] = value

    def as_matrix(self, *, ink=1, paper=0, border=0):
        """Return matrix of user-specified foreground and background objects."""
        colourdict = {BORDER: border, PAPER: paper, INK: ink}
        return tuple(
            tuple(colourdict[_pix] for _pix in _row)
            for _row in self._pixels
        )

    def as_image(
            self, *,
            ink=(255, 255, 255), paper=(0, 0, 0), border=(0, 0, 0)
        ):
        """Convert canvas to image."""
        if not Image:
            raise ImportError('Rendering to image requires PIL module.')
        if not self.height:
            return Image.new('RGB', (0, 0))
        img = Image.new('RGB', (self.width, self.height), border)
        img.putdata([
            _pix
            for _row in self.as_matrix(ink=ink, paper=paper, border=border)
            for _pix in _row
        ])
        return img

    def as_text(
            self, *,
            ink='@', paper='.', border='.',
            start='', end='\n'
        ):
        """Convert canvas to text."""
        if not self.height:
            return ''
        contents = ''.join(
            ''.join((start, *_row, end))
            for _row in self.as_matrix(ink=ink, paper=paper, border=border)
        )
        return blockstr(contents)
