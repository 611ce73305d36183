#!/usr/bin/env python3
"""
Print a banner using a PCF bitmap font
(c) 2019--2024 Rob Hagemans, licence: https://opensource.org/licenses/MIT
"""

import sys
import argparse
import logging

import pcfont
from pcfont.scripting import wrap_main, unescape
from pcfont.basetypes import Coord, RGB


def main():
    # parse command line
    parser = argparse.ArgumentParser()
    parser.add_argument(
        'text', nargs='*', type=str,
        help=(
            'text to be printed. '
            'multiple text arguments represent consecutive lines. '
            'if not given, read from standard input'
        )
    )
    parser.add_argument(
        '--font', '-f', type=str, required=True,
        help='PCF font file to use when printing text'
    )
    parser.add_argument(
        '--chars', type=str, default=None,
        help=(
            "characters to keep from the font, e.g. 'A-Z|a-z|0-9| ' "
            '(default: all)'
        )
    )
    parser.add_argument(
        '--ink', '--foreground', '-fg', type=str, default='',
        help=(
            'character or colour to use for ink/foreground '
            '(default: @ or (0,0,0))'
        )
    )
    parser.add_argument(
        '--paper', '--background', '-bg', type=str, default='',
        help=(
            'character or colour to use for paper/background '
            '(default: . or (255,255,255))'
        )
    )
    parser.add_argument(
        '--margin', '-m', type=Coord.create, default=(0, 0),
        help=(
            'number of background pixels to use as a margin '
            'in x and y direction (default: 0,0)'
        )
    )
    parser.add_argument(
        '--debug', action='store_true',
        help='show debugging output'
    )
    parser.add_argument(
        '--output',  default='', type=str,
        help=(
            'output file name. use .txt extension for text output, '
            'or image format for image output'
        )
    )
    parser.add_argument(
        '--image',  action='store_true',
        help=('output as image')
    )
    args = parser.parse_args()

    with wrap_main(args.debug):
        # read text from stdin if not supplied
        if not args.text:
            args.text = sys.stdin.read()
        else:
            # multiple options or \n give line breaks
            args.text = '\n'.join(args.text)
        args.ink = unescape(args.ink)
        args.paper = unescape(args.paper)
        args.text = unescape(args.text)
        font = pcfont.load(args.font)
        logging.info('Loaded %s', font)
        packed = pcfont.pack_font(font, args.chars)
        canvas = pcfont.render(packed, args.text, margin=args.margin)
        if args.image or args.output and not args.output.endswith('.txt'):
            ink = RGB.create(args.ink or (0, 0, 0))
            paper = RGB.create(args.paper or (255, 255, 255))
            image = canvas.as_image(ink=tuple(ink), paper=tuple(paper), border=tuple(paper))
            if args.output:
                image.save(args.output)
            else:
                image.show()
        else:
            ink = args.ink or '@'
            paper = args.paper or '.'
            text = canvas.as_text(ink=ink, paper=paper, border=paper)
            if not args.output:
                sys.stdout.write(text)
            else:
                with open(args.output, 'w') as outfile:
                    outfile.write(text)


if __name__ == '__main__':
    main()
