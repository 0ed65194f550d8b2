import struct

import pytest

from sng.chunks import long_numeric, byte_numeric, double_numeric, parse_integer
from sng.compiler import compile_bytes
from sng.exceptions import (
    BackendException,
    ColorTypeException,
    IncompleteException,
    OrderingException,
    RangeException,
    SizeMismatchException,
    UnexpectedEOFException,
    UnexpectedTokenException,
)
from sng.model import ColorMask, Token, Valid, SRGB_GAMMA
from sng.png import PNGInterlaceType


HEADER = 'IHDR { width 2 height 2 }\n'
IMAGE = 'IMAGE { 00ff ff00 }\n'
PALETTE_HEADER = 'IHDR { width 2 height 1 using color palette }\n'

CHRM = 'cHRM { white (0.3127, 0.3290) red (0.64, 0.33) green (0.30, 0.60) blue (0.15, 0.06) }\n'
SRGB_CHRM_PAYLOAD = (31270, 32900, 64000, 33000, 30000, 60000, 15000, 6000)


def chunk_payload(png_chunks, data, type):
    payloads = [_d for _t, _d in png_chunks(data) if _t == type]
    assert len(payloads) == 1
    return payloads[0]


def test_ihdr(png_chunks):
    image, data = compile_bytes('IHDR {\n  width 3\n  height 1\n  bitdepth 16\n  using color alpha\n}\nIMAGE { %s }\n' % ('00' * 24))

    assert image.width == 3
    assert image.height == 1
    assert image.bit_depth == 16
    assert image.color_type == ColorMask.COLOR | ColorMask.ALPHA
    assert image.interlace == PNGInterlaceType.NONE

    payload = chunk_payload(png_chunks, data, b'IHDR')
    assert struct.unpack('>IIBBBBB', payload) == (3, 1, 16, 6, 0, 0, 0)


def test_ihdr_interlace(png_chunks):
    _, data = compile_bytes('IHDR { width 2 height 2 with interlace }\n' + IMAGE)

    payload = chunk_payload(png_chunks, data, b'IHDR')
    assert struct.unpack('>IIBBBBB', payload) == (2, 2, 8, 0, 0, 0, 1)


def test_ihdr_bad_token():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes('IHDR { width 2 height 2 sepia }\n' + IMAGE)


def test_ihdr_quoted_keyword():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes('IHDR { "width" 2 height 2 }\n' + IMAGE)


def test_ihdr_missing_height():
    with pytest.raises(RangeException) as e:
        compile_bytes('IHDR { width 2 }\n' + IMAGE)

    assert 'height' in e.value.message


def test_ihdr_out_of_range():
    with pytest.raises(RangeException):
        compile_bytes('IHDR { width 2147483647 height 1 }\n')

    with pytest.raises(RangeException):
        compile_bytes('IHDR { width 1 height 1 bitdepth 256 }\n')


def test_plte(png_chunks, open_png):
    source = PALETTE_HEADER + 'PLTE {\n  (255, 0, 0)\n  (0, 0, 255)\n}\nIMAGE { 01 }\n'
    image, data = compile_bytes(source)

    assert image.palette == [(255, 0, 0), (0, 0, 255)]
    assert image.valid & Valid.PLTE

    assert chunk_payload(png_chunks, data, b'PLTE') == b'\xff\x00\x00\x00\x00\xff'

    png = open_png(data)
    assert png.mode == 'P'
    assert png.getpalette()[:6] == [255, 0, 0, 0, 0, 255]
    assert list(png.getdata()) == [0, 1]


def test_plte_chunk_order(png_chunks):
    _, data = compile_bytes(PALETTE_HEADER + 'gAMA { 1.0 }\nPLTE { (1, 2, 3) }\nIMAGE { 00 }\n')

    assert [_t for _t, _ in png_chunks(data)] == [b'IHDR', b'gAMA', b'PLTE', b'IDAT', b'IEND']


def test_plte_too_many_entries():
    entries = ' '.join(['(0, 0, 0)'] * 257)

    with pytest.raises(RangeException):
        compile_bytes(PALETTE_HEADER + 'PLTE { %s }\nIMAGE { 00 }\n' % entries)


def test_plte_max_entries(png_chunks):
    entries = ' '.join(['(%d, %d, %d)' % (_, _, _) for _ in range(256)])
    # with more than 62 entries the indexes are in hex
    _, data = compile_bytes(PALETTE_HEADER + 'PLTE { %s }\nIMAGE { 00ff }\n' % entries)

    assert len(chunk_payload(png_chunks, data, b'PLTE')) == 768


def test_plte_bad_syntax():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(PALETTE_HEADER + 'PLTE { 1, 2, 3 }\nIMAGE { 00 }\n')

    with pytest.raises(UnexpectedTokenException):
        compile_bytes(PALETTE_HEADER + 'PLTE { (a, 0, 0) }\nIMAGE { 00 }\n')

    with pytest.raises(UnexpectedTokenException):
        compile_bytes(PALETTE_HEADER + 'PLTE { (1, 2, 3, 4) }\nIMAGE { 00 }\n')


def test_plte_missing_comma():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(PALETTE_HEADER + 'PLTE { (1 2 3) (4 5 6) }\nIMAGE { 01 }\n')

    with pytest.raises(UnexpectedTokenException):
        compile_bytes(PALETTE_HEADER + 'PLTE { (1, 2 3) }\nIMAGE { 00 }\n')


def test_plte_byte_range():
    with pytest.raises(RangeException):
        compile_bytes(PALETTE_HEADER + 'PLTE { (256, 0, 0) }\nIMAGE { 00 }\n')


def test_plte_empty():
    with pytest.raises(BackendException):
        compile_bytes(PALETTE_HEADER + 'PLTE { }\nIMAGE { 00 }\n')


def test_plte_non_palette_image():
    with pytest.raises(ColorTypeException):
        compile_bytes(HEADER + 'PLTE { (0, 0, 0) }\n' + IMAGE)


def test_plte_after_image():
    with pytest.raises(OrderingException):
        compile_bytes(PALETTE_HEADER + 'IMAGE { 00 }\nPLTE { (0, 0, 0) }\n')


def test_chrm(png_chunks):
    image, data = compile_bytes(HEADER + CHRM + IMAGE)

    assert image.valid == Valid.cHRM
    assert image.chromaticities == (0.3127, 0.3290, 0.64, 0.33, 0.30, 0.60, 0.15, 0.06)

    payload = chunk_payload(png_chunks, data, b'cHRM')
    assert struct.unpack('>8I', payload) == SRGB_CHRM_PAYLOAD


def test_chrm_any_order():
    image, _ = compile_bytes(HEADER + 'cHRM { blue (0.15, 0.06) green (0.30, 0.60) white (0.3127, 0.3290) red (0.64, 0.33) }\n' + IMAGE)

    assert image.x_blue == 0.15
    assert image.y_white == 0.3290


@pytest.mark.parametrize('missing', ['white', 'red', 'green', 'blue'])
def test_chrm_incomplete(missing):
    points = {
        'white': '(0.3127, 0.3290)',
        'red':   '(0.64, 0.33)',
        'green': '(0.30, 0.60)',
        'blue':  '(0.15, 0.06)',
    }
    body = ' '.join(['%s %s' % (name, point) for name, point in points.items() if name != missing])

    with pytest.raises(IncompleteException):
        compile_bytes(HEADER + 'cHRM { %s }\n' % body + IMAGE)


def test_chrm_missing_comma():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'cHRM { white (0.3127 0.3290) red (0.64, 0.33) green (0.30, 0.60) blue (0.15, 0.06) }\n' + IMAGE)


def test_chrm_bad_color():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'cHRM { purple (0.1, 0.1) }\n' + IMAGE)

    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'cHRM { "white" (0.1, 0.1) }\n' + IMAGE)


def test_chrm_missing_parenthesis():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'cHRM { white 0.3127, 0.3290 }\n' + IMAGE)


def test_gama(png_chunks):
    image, data = compile_bytes(HEADER + 'gAMA { 0.45455 }\n' + IMAGE)

    assert image.gamma == 0.45455
    assert image.valid == Valid.gAMA
    assert chunk_payload(png_chunks, data, b'gAMA') == struct.pack('>I', 45455)


def test_gama_extra_token():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'gAMA { 1.0 2.0 }\n' + IMAGE)


@pytest.mark.parametrize('value', ['inf', 'nan'])
def test_gama_out_of_range(value):
    with pytest.raises(RangeException):
        compile_bytes(HEADER + 'gAMA { %s }\n' % value + IMAGE)


def test_gama_not_a_number():
    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'gAMA { -1 }\n' + IMAGE)

    with pytest.raises(UnexpectedTokenException):
        compile_bytes(HEADER + 'gAMA { gamma }\n' + IMAGE)


def test_srgb(png_chunks):
    image, data = compile_bytes(HEADER + 'sRGB { 0 }\n' + IMAGE)

    assert image.srgb_intent == 0
    assert image.gamma == SRGB_GAMMA
    assert [_t for _t, _ in png_chunks(data)] == [b'IHDR', b'gAMA', b'sRGB', b'cHRM', b'IDAT', b'IEND']
    assert chunk_payload(png_chunks, data, b'sRGB') == b'\x00'
    assert chunk_payload(png_chunks, data, b'gAMA') == struct.pack('>I', 45455)
    assert struct.unpack('>8I', chunk_payload(png_chunks, data, b'cHRM')) == SRGB_CHRM_PAYLOAD


def test_srgb_bad_intent():
    with pytest.raises(RangeException):
        compile_bytes(HEADER + 'sRGB { 4 }\n' + IMAGE)


def test_srgb_after_plte():
    with pytest.raises(OrderingException):
        compile_bytes(PALETTE_HEADER + 'PLTE { (0, 0, 0) }\nsRGB { 0 }\nIMAGE { 00 }\n')


def test_image_bitdepth_one(idat_data):
    _, data = compile_bytes('IHDR { width 8 height 1 bitdepth 1 }\nIMAGE { 10101010 }\n')

    assert idat_data(data) == b'\x00\xaa'


def test_image_rows_padding(idat_data):
    # each row starts on a byte boundary
    _, data = compile_bytes('IHDR { width 3 height 2 bitdepth 2 }\nIMAGE { 123 \n 321 }\n')

    assert idat_data(data) == b'\x00\x6c\x00\xe4'


def test_image_hex(open_png):
    _, data = compile_bytes(HEADER + 'IMAGE {\n  00 ff\n  ff 00\n}\n')

    assert list(open_png(data).getdata()) == [0, 255, 255, 0]


def test_image_rgb(open_png):
    _, data = compile_bytes('IHDR { width 2 height 1 using color }\nIMAGE { ff0000 0000ff }\n')

    png = open_png(data)
    assert png.mode == 'RGB'
    assert list(png.getdata()) == [(255, 0, 0), (0, 0, 255)]


def test_image_interlaced(open_png):
    source = 'IHDR { width 9 height 9 with interlace }\nIMAGE { %s }\n' % ''.join(['%02x' % _ for _ in range(81)])
    _, data = compile_bytes(source)

    assert list(open_png(data).getdata()) == list(range(81))


@pytest.mark.parametrize('body', ['00ff ff', '00ff ff00 00'])
def test_image_size_mismatch(body):
    with pytest.raises(SizeMismatchException):
        compile_bytes(HEADER + 'IMAGE { %s }\n' % body)


def test_image_sample_too_big():
    with pytest.raises(BackendException):
        compile_bytes('IHDR { width 1 height 1 bitdepth 2 }\nIMAGE { 4 }\n')


def test_image_eof():
    with pytest.raises(UnexpectedEOFException):
        compile_bytes(HEADER + 'IMAGE { 00ff ff00')


def test_idat_verbatim(png_chunks):
    _, data = compile_bytes(HEADER + 'IDAT { 78 9c 63 60 f8 ff 9f 01 00 05 01 01 ff }\n')

    payload = chunk_payload(png_chunks, data, b'IDAT')
    assert payload == bytes.fromhex('789c6360f8ff9f0100050101ff')


@pytest.mark.parametrize('text,value', [
    ('0', 0),
    ('10', 10),
    ('0x1f', 31),
    ('0X1F', 31),
    ('017', 15),
    ('2147483646', 2147483646),
])
def test_long_numeric(text, value):
    assert parse_integer(text) == value
    assert long_numeric(Token(text, 1, False)) == value


@pytest.mark.parametrize('text', ['08', '0x', '1.5', 'ten', '-'])
def test_long_numeric_invalid(text):
    with pytest.raises(UnexpectedTokenException):
        long_numeric(Token(text, 1, False))


def test_numeric_range():
    with pytest.raises(RangeException):
        long_numeric(Token('2147483647', 1, False))

    with pytest.raises(RangeException):
        byte_numeric(Token('0x100', 1, False))

    assert byte_numeric(Token('0xff', 1, False)) == 255


def test_numeric_eof():
    with pytest.raises(UnexpectedEOFException):
        long_numeric(None)

    with pytest.raises(UnexpectedEOFException):
        byte_numeric(None)

    with pytest.raises(UnexpectedEOFException):
        double_numeric(None)


def test_double_numeric():
    assert double_numeric(Token('1e-3', 1, False)) == 0.001
    assert double_numeric(Token('2', 1, False)) == 2.0
