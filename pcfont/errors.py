"""
pcfont.errors - decoding errors

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


class FileFormatError(Exception):
    """Incorrect file format."""


class InvalidHeader(FileFormatError):
    """File does not start with the PCF signature."""


class MissingTable(FileFormatError):
    """A required sub-table is absent from the table directory."""


class UnsupportedFormat(FileFormatError):
    """On-disk variant of a table is not implemented."""


class UnsupportedEndianness(UnsupportedFormat):
    """Table body is not stored most-significant byte first."""


class UnsupportedPadding(UnsupportedFormat):
    """Bitmap rows are not padded to 32-bit words."""


class UnsupportedMetricsForm(UnsupportedFormat):
    """Metrics table is in neither the default nor the compressed form."""


class OutOfBounds(FileFormatError):
    """Offset or length points outside the font data."""


class InvalidGeometry(FileFormatError):
    """Negative or overflowing glyph dimensions."""
