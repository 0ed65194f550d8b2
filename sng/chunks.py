'''
One compiler for each chunk type that is handled: a compiler is called by
the dispatcher once the opening delimiter of the chunk has been read and
must consume everything up to and including the closing delimiter.
'''
import math
import string

from .encoding import collect_data
from .model import ColorMask, Valid, SRGB_GAMMA, SRGB_CHROMATICITIES
from .png import PNGInterlaceType
from .exceptions import (
    IncompleteException,
    RangeException,
    SizeMismatchException,
    UnexpectedEOFException,
    UnexpectedTokenException,
)


LONG_MAX = 2 ** 31 - 2

# bit of the completeness mask for each of the cHRM points
CHROMATICITY_BITS = {
    'white': 0x01,
    'red':   0x02,
    'green': 0x04,
    'blue':  0x08,
}

SRGB_INTENTS = range(4)

DIGITS = {
    8:  string.octdigits,
    10: string.digits,
    16: string.hexdigits,
}


def parse_integer(text):
    '''Integer constants follow the C conventions: 0x for hexadecimal
    and a leading zero for octal.'''
    digits, base = text, 10
    if text[:2] in ('0x', '0X'):
        digits, base = text[2:], 16
    elif len(text) > 1 and text[0] == '0':
        digits, base = text[1:], 8

    if not digits or any([_ not in DIGITS[base] for _ in digits]):
        raise ValueError(f'invalid integer constant {text!r}')

    return int(digits, base)


def long_numeric(token):
    '''validate token as a PNG long (range 0..2^31-2)'''
    if token is None:
        raise UnexpectedEOFException('EOF while expecting long-integer constant')

    try:
        result = parse_integer(token.text)
    except ValueError:
        raise UnexpectedTokenException(f'invalid long constant `{token.text}\'', line=token.line)

    if result > LONG_MAX:
        raise RangeException(f'out of range long constant {token.text}', line=token.line)

    return result


def byte_numeric(token):
    '''validate token as a byte'''
    if token is None:
        raise UnexpectedEOFException('EOF while expecting byte constant')

    try:
        result = parse_integer(token.text)
    except ValueError:
        raise UnexpectedTokenException(f'invalid byte constant `{token.text}\'', line=token.line)

    if result > 255:
        raise RangeException(f'out of range byte constant {token.text}', line=token.line)

    return result


def double_numeric(token):
    '''validate token as a non-negative double-precision value'''
    if token is None:
        raise UnexpectedEOFException('EOF while expecting double-precision constant')

    try:
        result = float(token.text)
    except ValueError:
        raise UnexpectedTokenException(f'invalid double-precision constant `{token.text}\'', line=token.line)

    if not math.isfinite(result) or result < 0:
        raise RangeException(f'out of range double-precision constant {token.text}', line=token.line)

    return result


def close_chunk(lexer, name):
    '''single-value chunks end right after their value'''
    token = lexer.next_token()
    if token is None:
        raise UnexpectedEOFException('unexpected EOF')
    if not lexer.equals(token, '}'):
        raise UnexpectedTokenException(f'bad token `{token.text}\' in {name} specification', line=token.line)


def start_image_data(context):
    '''the first pixel data forces out the pre-IDAT portions of the file'''
    if not context.vocabulary.pixel_data:
        context.writer.write_info(context.image)


def compile_IHDR(context):
    lexer, image = context.lexer, context.image

    image.bit_depth = 8
    image.color_type = ColorMask.NONE
    image.interlace = PNGInterlaceType.NONE

    while (token := lexer.next_inner_token()) is not None:
        if lexer.equals(token, 'height'):
            image.height = long_numeric(lexer.next_token())
        elif lexer.equals(token, 'width'):
            image.width = long_numeric(lexer.next_token())
        elif lexer.equals(token, 'bitdepth'):
            image.bit_depth = byte_numeric(lexer.next_token())
        elif lexer.equals(token, 'using') or lexer.equals(token, 'with'):
            continue  # just syntactic sugar
        elif lexer.equals(token, 'palette'):
            image.color_type |= ColorMask.PALETTE
        elif lexer.equals(token, 'color'):
            image.color_type |= ColorMask.COLOR
        elif lexer.equals(token, 'alpha'):
            image.color_type |= ColorMask.ALPHA
        elif lexer.equals(token, 'interlace'):
            image.interlace = PNGInterlaceType.ADAM7
        else:
            raise UnexpectedTokenException(f'bad token `{token.text}\' in IHDR specification', line=token.line)

    if not image.height:
        raise RangeException('image height is zero or nonexistent')
    elif not image.width:
        raise RangeException('image width is zero or nonexistent')


def compile_PLTE(context):
    lexer, image = context.lexer, context.image

    while (token := lexer.next_inner_token()) is not None:
        if not lexer.equals(token, '('):
            raise UnexpectedTokenException('bad syntax in PLTE description', line=token.line)
        if len(image.palette) == 256:
            raise RangeException('too many entries in PLTE description', line=token.line)

        red = byte_numeric(lexer.next_token())
        lexer.require(',')
        green = byte_numeric(lexer.next_token())
        lexer.require(',')
        blue = byte_numeric(lexer.next_token())
        lexer.require(')')

        image.palette.append((red, green, blue))

    image.valid |= Valid.PLTE


def compile_IDAT(context):
    '''the hex data is written out verbatim as a chunk'''
    start_image_data(context)
    data = collect_data(context.lexer, pixel_per_char=False)
    context.writer.write_chunk(b'IDAT', data)


def compile_cHRM(context):
    lexer, image = context.lexer, context.image
    mask = 0

    while (token := lexer.next_inner_token()) is not None:
        if token.quoted or token.text not in CHROMATICITY_BITS:
            raise UnexpectedTokenException('invalid color name in cHRM specification', line=token.line)

        lexer.require('(')
        x = double_numeric(lexer.next_token())
        lexer.require(',')
        y = double_numeric(lexer.next_token())
        lexer.require(')')

        image.set_chromaticity(token.text, x, y)
        mask |= CHROMATICITY_BITS[token.text]

    if mask != 0x0f:
        raise IncompleteException('cHRM specification is not complete')

    image.valid |= Valid.cHRM


def compile_gAMA(context):
    context.image.gamma = double_numeric(context.lexer.next_token())
    close_chunk(context.lexer, 'gAMA')
    context.image.valid |= Valid.gAMA


def compile_sRGB(context):
    '''Like png_set_sRGB_gAMA_and_cHRM() also gAMA and cHRM are set.'''
    lexer, image = context.lexer, context.image

    token = lexer.next_token()
    intent = byte_numeric(token)
    if intent not in SRGB_INTENTS:
        raise RangeException(f'invalid sRGB rendering intent {intent}', line=token.line)
    close_chunk(lexer, 'sRGB')

    image.srgb_intent = intent
    image.gamma = SRGB_GAMMA
    for name, (x, y) in SRGB_CHROMATICITIES.items():
        image.set_chromaticity(name, x, y)

    image.valid |= Valid.sRGB | Valid.gAMA | Valid.cHRM


def compile_IMAGE(context):
    '''
    We know we can use one character per sample if
     (a) The image is paletted and the palette has 62 or fewer values.
     (b) The sample is 5 bits or less.
    These cover a lot of common cases.
    '''
    lexer, image = context.lexer, context.image

    pixel_per_char = image.sample_size <= 5 or \
        bool(image.color_type & ColorMask.PALETTE and len(image.palette) <= 62)

    start_image_data(context)
    data = collect_data(lexer, pixel_per_char)

    expected = image.width * image.height * image.pixel_size
    if len(data) != expected:
        raise SizeMismatchException(
            f'size of IMAGE ({len(data)} bytes) doesn\'t match height * width in IHDR ({expected} bytes)')

    context.writer.write_image(image, data)
