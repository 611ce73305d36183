"""
pcfont.binary - binary utilities

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


def ceildiv(num, den):
    """Integer division, rounding up."""
    return -(-num // den)


def align(num, exp):
    """Round up to multiple of 2**exp."""
    mask = 2**exp - 1
    return (num + mask) & ~mask


def bytes_to_bits(byteseq, width=None):
    """
    Convert bytes/bytearray/sequence of int to tuple of bits.
    Bits are taken most significant first.
    """
    bitstr = bin(int.from_bytes(byteseq, 'big'))[2:].zfill(8 * len(byteseq))
    bits = tuple(_c == '1' for _c in bitstr)
    if width is None:
        return bits
    return bits[:width]


def bits_to_bytes(bitseq):
    """
    Pack a sequence of bits into bytes, most significant bit first.
    The last byte is padded with zero bits.
    """
    bitseq = tuple(bitseq)
    if not bitseq:
        return b''
    bitstr = ''.join('1' if _b else '0' for _b in bitseq)
    bitstr = bitstr.ljust(align(len(bitstr), 3), '0')
    return int(bitstr, 2).to_bytes(len(bitstr) // 8, 'big')
