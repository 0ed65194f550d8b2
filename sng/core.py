"""
Core module for the abstraction of a binary chunk of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: a Chunk is
    an ordered collection of fields, declared as class attributes, that are
    packed one after the other.

    A Chunk can contain sub-chunks and the values of the fields can be
    passed as keyword arguments

        class Pair(Chunk):
            first  = fields.StructField('B')
            second = fields.StructField('B')

        Pair(first=1, second=2).pack() == b'\\x01\\x02'
    """

    def __init__(self, **kwargs):
        super().__init__()

        for name, value in kwargs.items():
            if name not in self._meta.fields:
                raise AttributeError(f'{self.__class__.__name__} has no field named \'{name}\'')
            setattr(self, name, value)

    def init(self):
        '''fields are created by their descriptor the first time they are accessed'''
        pass

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def _get_value(self):
        return {name: field.value for name, field in self.get_fields()}

    def _set_value(self, value):
        if value is not None:
            raise AttributeError('the fields of a chunk must be set one by one')

    def _get_size(self):
        '''the size is derived from the subchunks'''
        return sum([field.size for _, field in self.get_fields()])

    def _get_raw(self) -> bytes:
        value = b''
        for field_name, field_instance in self.get_fields():
            field_raw = field_instance.raw
            self.logger.debug("field '%s' raw=%r", field_name, field_raw)
            value += field_raw

        return value

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        offset = 0
        for name, field in self.get_fields():
            result[name] = (offset, field.size)
            offset += field.size

        return result

    def pack(self, stream=None):
        '''Encode the chunk: each field is packed in order so that the fields
        depending on the previous ones (lengths, checksums) are updated.'''
        value = b''
        for field_name, field_instance in self.get_fields():
            self.logger.debug('packing %s.%s' % (self.__class__.__name__, field_name))
            value += field_instance.pack()

        if stream is not None:
            stream.write(value)

        return value
