import io
import struct
import zlib

import pytest
from PIL import Image

from sng.png import PNG_SIGNATURE


def iter_png_chunks(data):
    '''Yield (type, data, crc) for each chunk of the PNG'''
    assert data[:8] == PNG_SIGNATURE

    offset = 8
    while offset < len(data):
        length, type = struct.unpack('>I4s', data[offset:offset + 8])
        payload = data[offset + 8:offset + 8 + length]
        crc, = struct.unpack('>I', data[offset + 8 + length:offset + 12 + length])
        yield type, payload, crc
        offset += 12 + length


@pytest.fixture
def png_chunks():
    '''list of (type, data) of a PNG, the CRCs are checked'''
    def _chunks(data):
        result = []
        for type, payload, crc in iter_png_chunks(data):
            assert crc == zlib.crc32(type + payload)
            result.append((type, payload))

        return result

    return _chunks


@pytest.fixture
def idat_data(png_chunks):
    '''the decompressed content of the IDAT chunks'''
    def _idat(data):
        return zlib.decompress(b''.join([_d for _t, _d in png_chunks(data) if _t == b'IDAT']))

    return _idat


@pytest.fixture
def open_png():
    def _open(data):
        image = Image.open(io.BytesIO(data))
        image.load()
        return image

    return _open
