"""
pcfont.renderer - draw text with a packed font

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
from collections import namedtuple

from .basetypes import Coord, Rectangle
from .properties import Props
from .canvas import Canvas
from .pack import PackedFont, pack_font


TextMetrics = namedtuple('TextMetrics', 'bounding_box next_position')


def _ensure_packed(font):
    if isinstance(font, PackedFont):
        return font
    return pack_font(font)


def measure_string(font, text, position=Coord(0, 0)):
    """Bounding rectangle and next pen position for a single line of text."""
    font = _ensure_packed(font)
    position = Coord(*position)
    glyphs = tuple(font.get_glyph(_c) for _c in text)
    # an empty font has no glyphs to fall back on
    glyphs = tuple(_g for _g in glyphs if _g is not None)
    width = sum(_g.device_width for _g in glyphs)
    height = max((_g.bounding_box.size.y for _g in glyphs), default=0)
    return TextMetrics(
        bounding_box=Rectangle(position, Coord(width, height)),
        next_position=position + Coord(width, 0),
    )


def layout_text(font, text, position=Coord(0, 0)):
    """
    Place glyphs for each character; lines are separated by newlines.
    Returns a list of glyph map entries with pen positions.
    """
    font = _ensure_packed(font)
    glyph_map = []
    for line_number, line in enumerate(text.split('\n')):
        pen = Coord(*position) + Coord(0, line_number * font.line_height)
        for char in line:
            glyph = font.get_glyph(char)
            if glyph is None:
                continue
            glyph_map.append(Props(glyph=glyph, x=pen.x, y=pen.y))
            pen += Coord(glyph.device_width, 0)
    return glyph_map


def render(font, text, *, margin=(0, 0)):
    """
    Render text to a canvas.

    font: PackedFont, or PcfFont to be packed
    text: text to render; missing characters use the replacement glyph
    margin: number of pixels to add around the text in x and y direction
    """
    font = _ensure_packed(font)
    margin = Coord(*margin)
    glyph_map = layout_text(font, text)
    if not glyph_map:
        return Canvas.blank(2*margin.x, 2*margin.y)
    rects = tuple(
        _entry.glyph.bounding_box.translate((_entry.x, _entry.y))
        for _entry in glyph_map
    )
    min_x = min(0, *(_r.top_left.x for _r in rects))
    min_y = min(_r.top_left.y for _r in rects)
    max_x = max(
        max(_r.top_left.x + _r.size.x for _r in rects),
        max(_e.x + _e.glyph.device_width for _e in glyph_map),
    )
    max_y = max(_r.top_left.y + _r.size.y for _r in rects)
    logging.debug('Rendering %d glyphs.', len(glyph_map))
    canvas = Canvas.blank(
        max_x - min_x + 2*margin.x, max_y - min_y + 2*margin.y
    )
    shift = Coord(margin.x - min_x, margin.y - min_y)
    for entry in glyph_map:
        for point in entry.glyph.points(font.data, (entry.x, entry.y)):
            canvas.draw_pixel(*(point + shift))
    return canvas
