'''
The vocabulary of the language: every chunk type that can appear into the
source, with the constraints about its repetition and its position with
respect to the other chunks.

A guard is a callable taking the compile context and raising an exception
if the chunk it belongs to cannot appear at this point of the stream; they
are evaluated in order before the chunk is compiled.
'''
from collections import OrderedDict

from . import chunks
from .model import ColorMask
from .exceptions import (
    ColorTypeException,
    NotImplementedChunkException,
    OrderingException,
    RepeatedChunkException,
)


def first(message):
    def guard(context):
        if context.previous is not None:
            raise OrderingException(message)
    return guard


def absent(*names, message):
    '''none of the named chunks must have been seen'''
    def guard(context):
        if any([context.vocabulary.count(_) for _ in names]):
            raise OrderingException(message)
    return guard


def no_pixel_data(message):
    def guard(context):
        if context.vocabulary.pixel_data:
            raise OrderingException(message)
    return guard


def contiguous(name, message):
    '''the chunks of this type must not be interleaved with other chunks'''
    def guard(context):
        if context.previous != name and context.vocabulary.count(name):
            raise OrderingException(message)
    return guard


def palette_image(message):
    def guard(context):
        if not context.image.color_type & ColorMask.PALETTE:
            raise ColorTypeException(message)
    return guard


class ChunkType(object):
    '''Static definition of a chunk type; a missing compiler means that the
    chunk is recognized but not handled.'''

    def __init__(self, name, multiple_ok=False, compiler=None, guards=()):
        self.name = name
        self.multiple_ok = multiple_ok
        self.compiler = compiler
        self.guards = guards

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.name})>'


CHUNK_TYPES = (
    # the PNG 1.0 chunks, IEND is not listed here because it is written at the end
    ChunkType('IHDR', compiler=chunks.compile_IHDR, guards=(
        first('IHDR chunk must come first'),
    )),
    ChunkType('PLTE', compiler=chunks.compile_PLTE, guards=(
        no_pixel_data('PLTE chunk must come before IDAT'),
        absent('bKGD', message='PLTE chunk encountered after bKGD'),
        absent('tRNS', message='PLTE chunk encountered after tRNS'),
        palette_image('PLTE chunk specified for non-palette image type'),
    )),
    ChunkType('IDAT', multiple_ok=True, compiler=chunks.compile_IDAT, guards=(
        absent('IMAGE', message='can\'t mix IDAT and IMAGE specs'),
        contiguous('IDAT', message='IDAT chunks must be contiguous'),
    )),
    ChunkType('cHRM', compiler=chunks.compile_cHRM, guards=(
        absent('PLTE', message='cHRM chunk must come before PLTE and IDAT'),
        no_pixel_data('cHRM chunk must come before PLTE and IDAT'),
    )),
    ChunkType('gAMA', compiler=chunks.compile_gAMA, guards=(
        absent('PLTE', message='gAMA chunk must come before PLTE and IDAT'),
        no_pixel_data('gAMA chunk must come before PLTE and IDAT'),
    )),
    ChunkType('iCCP'),
    ChunkType('sBIT'),
    ChunkType('sRGB', compiler=chunks.compile_sRGB, guards=(
        absent('PLTE', message='sRGB chunk must come before PLTE and IDAT'),
        no_pixel_data('sRGB chunk must come before PLTE and IDAT'),
    )),
    ChunkType('bKGD'),
    ChunkType('hIST'),
    ChunkType('tRNS'),
    ChunkType('pHYs'),
    ChunkType('sPLT', multiple_ok=True),
    ChunkType('tIME'),
    ChunkType('iTXt', multiple_ok=True),
    ChunkType('tEXt', multiple_ok=True),
    ChunkType('zTXt', multiple_ok=True),
    # special-purpose chunks of the PNG 1.2 specification
    ChunkType('oFFs'),
    ChunkType('pCAL'),
    ChunkType('sCAL'),
    ChunkType('gIFg'),
    ChunkType('gIFt'),
    ChunkType('gIFx'),
    ChunkType('fRAc'),
    # the whole image as uncompressed pixels
    ChunkType('IMAGE', compiler=chunks.compile_IMAGE, guards=(
        absent('IDAT', message='can\'t mix IDAT and IMAGE specs'),
    )),
    # private chunks
    ChunkType('private', multiple_ok=True),
)


class VocabularyEntry(object):

    def __init__(self, chunk_type):
        self.type = chunk_type
        self.count = 0

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.type.name}, count={self.count})>'

    @property
    def name(self):
        return self.type.name

    @property
    def multiple_ok(self):
        return self.type.multiple_ok

    @property
    def compiler(self):
        return self.type.compiler


class Vocabulary(object):
    '''The chunk types with the number of times each has been seen in the
    stream being compiled.'''

    def __init__(self, chunk_types=CHUNK_TYPES):
        self.entries = OrderedDict([(_.name, VocabularyEntry(_)) for _ in chunk_types])

    def __contains__(self, name):
        return name in self.entries

    def __getitem__(self, name):
        return self.entries[name]

    def get(self, name):
        return self.entries.get(name)

    def count(self, name):
        return self.entries[name].count

    @property
    def pixel_data(self):
        '''how many chunks carrying pixel data have been seen'''
        return self.count('IDAT') + self.count('IMAGE')

    def check(self, entry, context):
        '''Raise if the chunk of this entry is not allowed at this point of the stream.'''
        if not entry.multiple_ok and entry.count > 0:
            raise RepeatedChunkException(f'illegal repeated chunk {entry.name}')

        if entry.compiler is None:
            raise NotImplementedChunkException(f'{entry.name} chunk type is not handled yet')

        if entry.name != 'IHDR' and not self.count('IHDR'):
            raise OrderingException('IHDR chunk must come first')

        for guard in entry.type.guards:
            guard(context)

    def record(self, entry):
        entry.count += 1
