"""
pcfont.struct - binary structures

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import ctypes

from types import SimpleNamespace
from functools import partial

from .errors import OutOfBounds


##############################################################################
# binary structs


# type strings
TYPES = {
    'byte': ctypes.c_uint8,
    'ubyte': ctypes.c_uint8,
    'uint8': ctypes.c_uint8,
    'B': ctypes.c_uint8,

    'int8': ctypes.c_int8,
    'b': ctypes.c_int8,

    'word': ctypes.c_uint16,
    'uword': ctypes.c_uint16,
    'uint16': ctypes.c_uint16,
    'H': ctypes.c_uint16,

    'short': ctypes.c_int16,
    'int16': ctypes.c_int16,
    'h': ctypes.c_int16,

    'dword': ctypes.c_uint32,
    'uint32': ctypes.c_uint32,
    'I': ctypes.c_uint32,
    'L': ctypes.c_uint32,

    'long': ctypes.c_int32,
    'int32': ctypes.c_int32,
    'i': ctypes.c_int32,
    'l': ctypes.c_int32,
}


def _parse_type(atype):
    """Convert struct member type specification to ctypes base type."""
    if isinstance(atype, type):
        return atype
    try:
        return TYPES[atype]
    except KeyError:
        pass
    raise ValueError('Field type `{}` not understood'.format(atype))


class _WrappedCValue:
    """Wrapper for ctypes value."""

    @classmethod
    def from_cvalue(cls, cvalue, type):
        obj = cls()
        obj._cvalue = cvalue
        obj._type = type
        return obj

    def __bytes__(self):
        return bytes(self._cvalue)


class _WrappedCType:
    """Wrapper for ctypes type, factory for _WrappedCValue objects."""

    def __mul__(self, count):
        """Create an array."""
        return self.array(count)

    __rmul__ = __mul__

    def __call__(self, *args, **kwargs):
        """Instantiate a struct variable."""
        # pylint: disable=no-member
        return self.from_cvalue(self._ctype(*args, **kwargs))

    def from_cvalue(self, cvalue):
        """Instantiate a struct variable from a cvalue."""
        # pylint: disable=no-member
        return self._value_cls.from_cvalue(cvalue, self)

    def read_from(self, data, offset=0):
        """
        Read struct from a buffer at an absolute offset.
        Raises OutOfBounds if the struct does not fit inside the buffer.
        """
        if offset < 0 or offset + self.size > len(data):
            raise OutOfBounds(
                f'Reading {self.size} bytes at offset {offset} '
                f'exceeds buffer of {len(data)} bytes.'
            )
        try:
            # pylint: disable=no-member
            cvalue = self._ctype.from_buffer_copy(data, offset)
        except ValueError as e:
            raise OutOfBounds(e) from e
        return self.from_cvalue(cvalue)

    def array(self, count):
        return ArrayType(self, count)

    @property
    def size(self):
        # pylint: disable=no-member
        return ctypes.sizeof(self._ctype)


class IntValue(_WrappedCValue):
    """Wrapper for integer scalars."""

    def __int__(self):
        return self._cvalue.value

    def __repr__(self):
        return type(self).__name__ + '({})'.format(self._cvalue.value)

    # the following allow this class to mostly stand in for an int

    def __index__(self):
        return int(self)

    def __eq__(self, rhs):
        return int(self) == rhs

    def __hash__(self):
        return hash(int(self))


class ScalarType(_WrappedCType):
    """Wrapper for scalar types. Mostly used to define arrays and structs."""

    _value_cls = IntValue

    def __init__(self, endian, ctype):
        if endian[:1].lower() in ('b', '>'):
            self._ctype = ctype.__ctype_be__
        elif endian[:1].lower() in ('l', '<'):
            self._ctype = ctype.__ctype_le__
        else:
            raise ValueError(f"Endianness '{endian}' not recognised.")

    def read_int(self, data, offset=0):
        """Read integer from a buffer at an absolute offset."""
        return int(self.read_from(data, offset))


class StructValue(_WrappedCValue):
    """Wrapper for ctypes Structure."""

    def __getattr__(self, attr):
        if not attr.startswith('_'):
            return getattr(self._cvalue, attr)
        raise AttributeError(attr)

    @property
    def __dict__(self):
        return dict(
            (field, getattr(self, field))
            for field, *_ in self._cvalue._fields_
        )

    def __repr__(self):
        props = vars(self)
        return type(self).__name__ + '({})'.format(
            ', '.join(
                '{}={}'.format(_fld, _val)
                for _fld, _val in props.items()
            )
        )


class StructType(_WrappedCType):
    """
    Represent a structured type.

    mystruct = StructType('big', first='uint8', second='uint16')
    s = mystruct(first=1, second=2)

    assert bytes(s) == b'\1\0\2'
    assert vars(mystruct.read_from(b'\1\0\2')) == vars(s)
    """

    _value_cls = StructValue

    def __init__(self, endian, /, **description):
        """Create a structured type."""
        if endian[:1].lower() in ('b', '>'):
            parent = ctypes.BigEndianStructure
        elif endian[:1].lower() in ('l', '<'):
            parent = ctypes.LittleEndianStructure
        else:
            raise ValueError(f"Endianness '{endian}' not recognised.")

        class _CStruct(parent):
            _fields_ = tuple(
                (_field, _parse_type(_type))
                for _field, _type in description.items()
            )
            _pack_ = True

        self._ctype = _CStruct

    def __call__(self, **kwargs):
        """Instantiate a struct variable."""
        return self.from_cvalue(self._ctype(**kwargs))


class ArrayValue(_WrappedCValue):
    """Wrapper for ctypes arrays."""

    def __getitem__(self, item):
        value = self._cvalue[item]
        if isinstance(value, ctypes.Structure):
            return self._type.element_type.from_cvalue(value)
        return value

    def __iter__(self):
        return (self[_i] for _i in range(len(self)))

    def __len__(self):
        return len(self._cvalue)

    def __repr__(self):
        return type(self).__name__ + '({})'.format(
            ', '.join(
                str(_s) for _s in iter(self)
            )
        )


class ArrayType(_WrappedCType):
    """Wrapper for ctypes array type."""

    _value_cls = ArrayValue

    def __init__(self, struct, count):
        if count < 0:
            raise OutOfBounds(f'Negative array length {count}.')
        self._count = count
        self.element_type = struct
        self._ctype = struct._ctype * count

    def __call__(self, *args):
        """Instantiate an array variable."""
        args = (
            _arg._cvalue if isinstance(_arg, _WrappedCValue) else _arg
            for _arg in args
        )
        return ArrayValue.from_cvalue(self._ctype(*args), self)


big_endian = SimpleNamespace(
    Struct=partial(StructType, '>'),
    uint8=ScalarType('>', ctypes.c_uint8),
    int8=ScalarType('>', ctypes.c_int8),
    uint16=ScalarType('>', ctypes.c_uint16),
    int16=ScalarType('>', ctypes.c_int16),
    uint32=ScalarType('>', ctypes.c_uint32),
    int32=ScalarType('>', ctypes.c_int32),
)

little_endian = SimpleNamespace(
    Struct=partial(StructType, '<'),
    uint8=ScalarType('<', ctypes.c_uint8),
    int8=ScalarType('<', ctypes.c_int8),
    uint16=ScalarType('<', ctypes.c_uint16),
    int16=ScalarType('<', ctypes.c_int16),
    uint32=ScalarType('<', ctypes.c_uint32),
    int32=ScalarType('<', ctypes.c_int32),
)
