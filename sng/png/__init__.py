'''
# Portable Network Graphics

Declarations of the chunks the compiler is able to emit.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html> and
is available a full test-suite with a lot of PNG images covering all
the possible cases at <http://www.schaik.com/pngsuite/>.

'''
from enum import Enum

from ..core import Chunk
from .. import fields
from ..common import crc


PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


class PNGColorType(Enum):
    '''The color type definition of the PNG is a little tricky and doesn't seem
    to follow a bit-mask. We are going to list all the valid cases.'''
    GRAYSCALE = 0x00
    RGB       = 0x02
    RGB_PALETTE = 0x03
    GS_ALPHA    = 0x04
    RGBA        = 0x06


# bit depths allowed for each color type
PNG_BIT_DEPTHS = {
    PNGColorType.GRAYSCALE:   (1, 2, 4, 8, 16),
    PNGColorType.RGB:         (8, 16),
    PNGColorType.RGB_PALETTE: (1, 2, 4, 8),
    PNGColorType.GS_ALPHA:    (8, 16),
    PNGColorType.RGBA:        (8, 16),
}


class PNGCompressionType(Enum):
    '''There is only one method of compression'''
    DEFLATE = 0x00


class PNGFilterType(Enum):
    '''This indicates the preprocessing method applied to the image data before compression. At present, only filter method 0 is defined'''
    ADAPTIVE = 0x00


class PNGFilterAdaptiveType(Enum):
    NONE = 0x00


class PNGInterlaceType(Enum):
    NONE  = 0x00
    ADAM7 = 0x01


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=PNG_SIGNATURE)


class IHDRData(Chunk):
    '''
    Width and height give the image dimensions in pixels.
    Bit depth is a single-byte integer giving the number of bits per sample or per palette index (not per pixel).
    Color type is a single-byte integer that describes the interpretation of the image data.
    '''
    width       = fields.StructField('I')
    height      = fields.StructField('I')
    depth       = fields.StructField('B', default=8)
    color       = fields.StructField('B', enum=PNGColorType, default=PNGColorType.GRAYSCALE)
    compression = fields.StructField('B', enum=PNGCompressionType, default=PNGCompressionType.DEFLATE)
    filter      = fields.StructField('B', enum=PNGFilterType, default=PNGFilterType.ADAPTIVE)
    interlace   = fields.StructField('B', enum=PNGInterlaceType, default=PNGInterlaceType.NONE)


class PLTEEntry(Chunk):
    red   = fields.StructField('B')
    green = fields.StructField('B')
    blue  = fields.StructField('B')


class cHRMData(Chunk):
    '''Each value is encoded as a 4-byte unsigned integer, representing the x or y value times 100000.'''
    white_x = fields.StructField('I')
    white_y = fields.StructField('I')
    red_x   = fields.StructField('I')
    red_y   = fields.StructField('I')
    green_x = fields.StructField('I')
    green_y = fields.StructField('I')
    blue_x  = fields.StructField('I')
    blue_y  = fields.StructField('I')


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk
    '''
    length = fields.LengthField('Data')
    type   = fields.StringField(4)
    Data   = fields.StringField(default=b'')
    crc    = crc.CRCField(['type', 'Data'])
