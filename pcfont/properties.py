"""
pcfont.properties - property structures

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

from types import SimpleNamespace


class Props(SimpleNamespace):
    """SimpleNamespace with additional methods"""

    # don't pollute the object namespace
    # we only have __dunder__ methods

    def __str__(self):
        return '\n'.join(
            f'{_k}: {_v}'
            for _k, _v in vars(self).items()
        )
