"""
pcfont.font - decoded PCF font

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
from bisect import bisect_left
from types import MappingProxyType

from .basetypes import BoundingBox


REPLACEMENT_CHARACTER = 0xfffd
SPACE = 0x20


class PcfFont:
    """Immutable decoded font: glyph table, bounding box and fallback glyph."""

    def __init__(
            self, glyphs=(), *, bounding_box=BoundingBox(),
            accelerators=None, encoding=None, bitmap_info=None, tables=None,
        ):
        glyphs = sorted(glyphs, key=lambda _g: _g.code_point)
        self._glyphs = tuple(glyphs)
        self._code_points = tuple(_g.code_point for _g in self._glyphs)
        if len(set(self._code_points)) != len(self._code_points):
            raise ValueError('Font contains more than one glyph per code point.')
        self._bounding_box = BoundingBox(*bounding_box)
        self._accelerators = accelerators
        self._encoding = encoding
        self._bitmap_info = bitmap_info
        self._tables = MappingProxyType(dict(tables or {}))
        self._replacement_character = self._find_replacement()

    def _find_replacement(self):
        """Index of the U+FFFD glyph, else the space glyph, else 0."""
        for code_point in (REPLACEMENT_CHARACTER, SPACE):
            index = self._find(code_point)
            if index is not None:
                return index
        logging.debug('No replacement or space glyph; using first glyph.')
        return 0

    def _find(self, code_point):
        """Index of glyph for code point, or None."""
        index = bisect_left(self._code_points, code_point)
        if index < len(self._code_points) and self._code_points[index] == code_point:
            return index
        return None

    def __repr__(self):
        return (
            f'{type(self).__name__}(glyphs={len(self._glyphs)}, '
            f'bounding_box={tuple(self._bounding_box)}, '
            f'line_height={self.line_height})'
        )

    def __eq__(self, other):
        if not isinstance(other, PcfFont):
            return NotImplemented
        return (
            self._glyphs == other._glyphs
            and self._bounding_box == other._bounding_box
            and self._accelerators == other._accelerators
            and self._encoding == other._encoding
            and self._bitmap_info == other._bitmap_info
            and dict(self._tables) == dict(other._tables)
        )

    def __hash__(self):
        return hash((self._glyphs, self._bounding_box))

    def __len__(self):
        return len(self._glyphs)

    ##########################################################################
    # properties

    @property
    def glyphs(self):
        """Read-only mapping from code point to glyph, in code point order."""
        return MappingProxyType(dict(zip(self._code_points, self._glyphs)))

    @property
    def glyph_list(self):
        """Glyphs in code point order."""
        return self._glyphs

    @property
    def bounding_box(self):
        return self._bounding_box

    @property
    def line_height(self):
        return self._bounding_box.size.y

    @property
    def replacement_character(self):
        """Index into glyph_list of the glyph used for missing characters."""
        return self._replacement_character

    @property
    def accelerators(self):
        return self._accelerators

    @property
    def encoding(self):
        return self._encoding

    @property
    def bitmap_info(self):
        return self._bitmap_info

    @property
    def tables(self):
        return self._tables

    ##########################################################################
    # glyph access

    def get_chars(self):
        """Characters for which the font has a glyph."""
        return tuple(_g.encoding for _g in self._glyphs if _g.encoding is not None)

    def get_default_glyph(self):
        """Glyph used for missing characters, or None if the font is empty."""
        if not self._glyphs:
            return None
        return self._glyphs[self._replacement_character]

    def get_glyph(self, char):
        """
        Get glyph by character or code point.
        Falls back to the replacement glyph if the font does not have it.
        """
        if isinstance(char, str):
            if len(char) != 1:
                raise ValueError(f'Expected a single character, got {char!r}.')
            char = ord(char)
        index = self._find(char)
        if index is None:
            return self.get_default_glyph()
        return self._glyphs[index]

    def __contains__(self, char):
        if isinstance(char, str):
            if len(char) != 1:
                return False
            char = ord(char)
        return self._find(char) is not None
