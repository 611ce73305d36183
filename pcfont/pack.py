"""
pcfont.pack - compact glyph representation for embedding

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
from bisect import bisect_left
from collections import namedtuple

from .basetypes import Rectangle
from .binary import bits_to_bytes
from .errors import InvalidGeometry
from .font import REPLACEMENT_CHARACTER, SPACE


##############################################################################
# character ranges

class CharacterRanges:
    """
    Set of characters given as single characters and inclusive ranges.

    Accepts a string such as 'A-Z|a-z|0-9| ' in which items are separated
    by `|` and a range is written as first-last,
    or an iterable of characters and (first, last) pairs.
    """

    def __init__(self, ranges):
        if isinstance(ranges, str):
            ranges = self._parse(ranges)
        self._ranges = tuple(
            (_r, _r) if isinstance(_r, str) else tuple(_r)
            for _r in ranges
        )
        for first, last in self._ranges:
            if len(first) != 1 or len(last) != 1:
                raise ValueError(
                    f'Character range bounds must be single characters: {first!r}, {last!r}'
                )

    @staticmethod
    def _parse(rangestr):
        for item in rangestr.split('|'):
            if len(item) == 3 and item[1] == '-':
                yield item[0], item[2]
            elif len(item) == 1:
                yield item
            else:
                raise ValueError(f'Character range `{item}` not understood.')

    def __contains__(self, char):
        return any(_first <= char <= _last for _first, _last in self._ranges)

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self._ranges)


##############################################################################
# packed font

class PackedGlyph(namedtuple(
        'PackedGlyph', 'character bounding_box device_width start_index'
    )):
    """Glyph record pointing into a packed bit stream."""

    def pixel(self, data, x, y):
        """Pixel (x, y) of the glyph is inked."""
        index = self.start_index + y * self.bounding_box.size.x + x
        return bool(data[index // 8] & (0x80 >> (index % 8)))

    def points(self, data, position=(0, 0)):
        """Generate inked points, translated to the given position."""
        rect = self.bounding_box.translate(position)
        for index, point in enumerate(rect.points(), self.start_index):
            if data[index // 8] & (0x80 >> (index % 8)):
                yield point


class PackedFont:
    """Font serialised into glyph records and one bit-packed data stream."""

    def __init__(
            self, glyphs, data, *,
            replacement_character=0, line_height=0, bounding_box=Rectangle(),
        ):
        self.glyphs = tuple(glyphs)
        self.data = bytes(data)
        self.replacement_character = replacement_character
        self.line_height = line_height
        self.bounding_box = bounding_box
        self._chars = tuple(_g.character for _g in self.glyphs)

    def __repr__(self):
        return (
            f'{type(self).__name__}(glyphs={len(self.glyphs)}, '
            f'data={len(self.data)} bytes, line_height={self.line_height}, '
            f'replacement_character={self.replacement_character})'
        )

    def __eq__(self, other):
        if not isinstance(other, PackedFont):
            return NotImplemented
        return (
            self.glyphs == other.glyphs and self.data == other.data
            and self.replacement_character == other.replacement_character
            and self.line_height == other.line_height
            and self.bounding_box == other.bounding_box
        )

    def get_glyph(self, char):
        """
        Get glyph record for a character, or the replacement glyph.
        Returns None if the font is empty.
        """
        if not self.glyphs:
            return None
        # glyphs are stored in character order
        index = bisect_left(self._chars, char)
        if index < len(self._chars) and self._chars[index] == char:
            return self.glyphs[index]
        return self.glyphs[self.replacement_character]


def pack_font(font, ranges=None):
    """
    Serialise a decoded font into glyph records and a packed bit stream.

    ranges: CharacterRanges, or anything its constructor accepts, selecting
        the characters to keep (default: all)
    """
    if ranges is not None and not isinstance(ranges, CharacterRanges):
        ranges = CharacterRanges(ranges)
    records, bits = [], []
    replacement_character = None
    for glyph in font.glyph_list:
        char = glyph.encoding
        if char is None:
            logging.debug(
                'Dropping glyph %#06x without a character.', glyph.code_point
            )
            continue
        if ranges is not None and char not in ranges:
            continue
        if glyph.shift_x < 0:
            raise InvalidGeometry(
                f'Glyph {glyph.code_point:#06x} has negative advance {glyph.shift_x}.'
            )
        if ord(char) == REPLACEMENT_CHARACTER or (
                ord(char) == SPACE and replacement_character is None
            ):
            replacement_character = len(records)
        records.append(PackedGlyph(
            character=char,
            bounding_box=Rectangle.from_bounding_box(glyph.bounding_box),
            device_width=glyph.shift_x,
            start_index=len(bits),
        ))
        bits.extend(glyph.bitmap)
    if not records:
        logging.warning('No glyphs retained in packed font.')
    return PackedFont(
        records, bits_to_bytes(bits),
        replacement_character=replacement_character or 0,
        line_height=font.line_height,
        bounding_box=Rectangle.from_bounding_box(font.bounding_box),
    )
