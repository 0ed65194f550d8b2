"""
A Field is "fundamental" datatype from the format point of view, something directly
packable into bytes without needing to know about its siblings.

PNG is a network-byte-order format so all the fields default to big endian.
"""
import logging
import struct
from enum import Enum

from .meta import FieldBase, Endianess


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, endianess=Endianess.BIG_ENDIAN):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.endianess = endianess

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    def _get_size(self) -> int:
        return len(self.raw)

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def _update_value(self):
        '''This is used to update the value before packing'''
        pass

    def pack(self, stream=None):
        '''Encode the field and write it to the stream, if any.

        This operation is not idempotent: fields depending on other fields
        recalculate their value here.'''
        self._update_value()
        raw = self.raw

        if stream is not None:
            stream.write(raw)

        return raw


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing
    integers to bytes.

    The "enum" argument allows to use a subclass of enum.Enum as value
    for the field.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if not self.enum:
            return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def value_from_default(self):
        if not self.enum or isinstance(self.default, Enum):
            return super().value_from_default()

        return self.enum(self.default)

    def _set_value(self, value) -> None:
        if self.enum and not isinstance(value, self.enum):
            value = self.enum(value)

        super()._set_value(value)

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value if not self.enum else self.value.value)


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    If "n" is given the field accepts only values of that length, otherwise
    the length follows the value."""

    def __init__(self, n=None, **kw):
        self.length = n
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'\x00' * (self.length or 0)

    def _set_value(self, value) -> None:
        if self.length is not None and len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        super()._set_value(bytes(value))

    def _get_raw(self) -> bytes:
        return self.value


class ArrayField(Field):
    '''Pack a list of Chunks of the same kind one after the other.

    This class must behave like a list in python, obviously cannot implement all the methods.
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls
        kw.setdefault('default', [])
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        return list(self.default)

    def clear(self):
        self.value.clear()

    def append(self, element):
        if not isinstance(element, self.field_cls):
            raise ValueError(f'{self.__class__.__name__} accepts only {self.field_cls.__name__} elements')
        element.father = self
        self.value.append(element)

    def _get_raw(self) -> bytes:
        return b''.join([_.raw for _ in self.value])

    def pack(self, stream=None):
        raw = b''.join([_.pack() for _ in self.value])

        if stream is not None:
            stream.write(raw)

        return raw


class LengthField(StructField):
    '''Unsigned integer that contains the size of a sibling field.'''

    def __init__(self, field_name, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.field_name = field_name

    def calculate(self):
        return getattr(self.father, self.field_name).size

    def _update_value(self):
        self.value = self.calculate()
