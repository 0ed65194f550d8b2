'''
Emission of a PNG stream starting from an ImageDescription.

The writer mirrors the sequence libpng imposes to its users: write_info()
emits everything that must come before the image data, write_chunk() and
write_image() emit the IDAT chunks and write_end() closes the stream.
'''
import logging
import struct
import zlib

from bitstring import Bits

from . import (
    PNG_BIT_DEPTHS,
    PNGChunk,
    PNGColorType,
    PNGFilterAdaptiveType,
    PNGHeader,
    PNGInterlaceType,
    IHDRData,
    PLTEEntry,
    cHRMData,
)
from .. import fields
from ..exceptions import BackendException
from ..model import Valid


# (x start, y start, x step, y step) of each pass
ADAM7_PASSES = (
    (0, 0, 8, 8),
    (4, 0, 8, 8),
    (0, 4, 4, 8),
    (2, 0, 4, 4),
    (0, 2, 2, 4),
    (1, 0, 2, 2),
    (0, 1, 1, 2),
)

# compressed data is split in IDAT chunks of this size
IDAT_SIZE = 8192


def fixed_point(value):
    '''gAMA and cHRM store their values times 100000'''
    return int(value * 100000 + 0.5)


def iter_passes(image, data):
    '''Yield the sub-images, as a list of rows of pixel bytes, in the order
    they are stored into the data stream.'''
    pixel_size = image.pixel_size
    row_size = image.width * pixel_size
    rows = [data[_:_ + row_size] for _ in range(0, len(data), row_size)]

    if image.interlace == PNGInterlaceType.NONE:
        yield rows
        return

    for x0, y0, dx, dy in ADAM7_PASSES:
        if x0 >= image.width or y0 >= image.height:
            continue

        if pixel_size == 1:
            yield [rows[y][x0::dx] for y in range(y0, image.height, dy)]
            continue

        yield [
            b''.join([rows[y][_ * pixel_size:(_ + 1) * pixel_size] for _ in range(x0, image.width, dx)])
            for y in range(y0, image.height, dy)
        ]


def pack_scanline(row, depth):
    '''Returns the bytes of the scanline: samples smaller than a byte, one
    for each byte of the row, are packed together starting from the most
    significant bits.'''
    if depth >= 8:
        return bytes(row)

    return Bits().join([Bits(uint=_, length=depth) for _ in row]).tobytes()


class PNGWriter(object):

    def __init__(self, stream):
        self.logger = logging.getLogger(f'{self.__module__}.{self.__class__.__name__}')
        self.stream = stream
        self.chunks = []

    def _write(self, chunk):
        try:
            chunk.pack(stream=self.stream)
        except struct.error as e:
            raise BackendException(f'value out of range in chunk {chunk.type.value.decode()}: {e}')
        except OSError as e:
            raise BackendException(f'write error: {e}')

    def write_chunk(self, type, data):
        '''Frame the data with length, type and CRC and write it out'''
        chunk = PNGChunk(type=type, Data=data)
        self.logger.debug('writing chunk %s with %d bytes', type.decode(), chunk.Data.size)
        self._write(chunk)
        self.chunks.append(type)

    def check_header(self, image):
        try:
            color_type = image.png_color_type
        except ValueError:
            raise BackendException(f'invalid color type {image.color_type!r}')

        if image.bit_depth not in PNG_BIT_DEPTHS[color_type]:
            raise BackendException(f'invalid bit depth {image.bit_depth} for color type {color_type.name}')

        if color_type == PNGColorType.RGB_PALETTE and len(image.palette) > (1 << image.bit_depth):
            raise BackendException(f'too many palette entries for bit depth {image.bit_depth}')

        if image.valid & Valid.PLTE and not image.palette:
            raise BackendException('the palette is empty')

        return color_type

    def write_info(self, image):
        '''Write the signature, IHDR and all the chunks that must come before IDAT'''
        color_type = self.check_header(image)

        try:
            PNGHeader().pack(stream=self.stream)
        except OSError as e:
            raise BackendException(f'write error: {e}')

        self.write_chunk(b'IHDR', IHDRData(
            width=image.width,
            height=image.height,
            depth=image.bit_depth,
            color=color_type,
            interlace=image.interlace,
        ))

        if image.valid & Valid.gAMA:
            self.write_chunk(b'gAMA', fields.StructField('I', default=fixed_point(image.gamma)))

        if image.valid & Valid.sRGB:
            self.write_chunk(b'sRGB', fields.StructField('B', default=image.srgb_intent))

        if image.valid & Valid.cHRM:
            self.write_chunk(b'cHRM', cHRMData(**dict(zip(
                cHRMData._meta.fields,
                [fixed_point(_) for _ in image.chromaticities],
            ))))

        if image.valid & Valid.PLTE:
            entries = fields.ArrayField(PLTEEntry)
            for red, green, blue in image.palette:
                entries.append(PLTEEntry(red=red, green=green, blue=blue))
            self.write_chunk(b'PLTE', entries)

    def write_image(self, image, data):
        '''Filter, pack and compress the pixels, one byte per sample if the bit
        depth is less than eight, and write them as IDAT chunks.'''
        filter_type = bytes([PNGFilterAdaptiveType.NONE.value])
        scanlines = []

        try:
            for sub_image in iter_passes(image, data):
                for row in sub_image:
                    scanlines.append(filter_type)
                    scanlines.append(pack_scanline(row, image.bit_depth))
        except ValueError as e:
            raise BackendException(f'sample does not fit bit depth {image.bit_depth}: {e}')

        raw = b''.join(scanlines)

        self.logger.debug('compressing %d bytes of image data', len(raw))
        compressed = zlib.compress(raw)

        for offset in range(0, len(compressed), IDAT_SIZE):
            self.write_chunk(b'IDAT', compressed[offset:offset + IDAT_SIZE])

    def write_end(self):
        self.write_chunk(b'IEND', b'')

        try:
            self.stream.flush()
        except OSError as e:
            raise BackendException(f'write error: {e}')
