'''
The two textual encodings for a data segment:

 1. one character per byte, values are
    0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ
    so up to 62 values per sample.

 2. two hex digits per byte, the first one being the high nibble.

In either format whitespace is ignored.
'''
import logging
import string

from .exceptions import MalformedDataException, UnexpectedEOFException


logger = logging.getLogger(__name__)


MEMORY_QUANTUM = 1024

HEXDIGITS = frozenset(string.hexdigits)


def base62_value(c):
    if c in string.digits:
        return ord(c) - ord('0')
    elif c in string.ascii_lowercase:
        return ord(c) - ord('a') + 10
    elif c in string.ascii_uppercase:
        return ord(c) - ord('A') + 36

    raise MalformedDataException('bad character in data segment')


class DataCollector(object):
    '''Accumulates the bytes of a data segment one character at a time.'''

    def __init__(self, pixel_per_char):
        self.pixel_per_char = pixel_per_char
        self.buffer = bytearray(MEMORY_QUANTUM)
        self.nbytes = 0
        self.nibble = None

    def _append(self, value):
        if self.nbytes == len(self.buffer):
            self.buffer.extend(bytes(MEMORY_QUANTUM))
        self.buffer[self.nbytes] = value
        self.nbytes += 1

    def feed(self, c):
        if c in string.whitespace:
            return

        if self.pixel_per_char:
            self._append(base62_value(c))
            return

        if c not in HEXDIGITS:
            raise MalformedDataException('bad character in data segment')

        if self.nibble is None:
            self.nibble = int(c, 16)
        else:
            self._append(self.nibble << 4 | int(c, 16))
            self.nibble = None

    def finish(self) -> bytes:
        if self.nibble is not None:
            raise MalformedDataException('odd number of hex digits in data segment')

        return bytes(self.buffer[:self.nbytes])


def decode_base62(text) -> bytes:
    collector = DataCollector(pixel_per_char=True)
    for c in text:
        collector.feed(c)

    return collector.finish()


def decode_hex(text) -> bytes:
    collector = DataCollector(pixel_per_char=False)
    for c in text:
        collector.feed(c)

    return collector.finish()


def collect_data(lexer, pixel_per_char) -> bytes:
    '''Read the data segment up to the closing delimiter.'''
    logger.debug('collecting data in %s format', 'pixel-per-character' if pixel_per_char else 'hex')

    collector = DataCollector(pixel_per_char)
    while True:
        c = lexer.read_char()
        if c == '':
            raise UnexpectedEOFException('unexpected EOF in data segment', line=lexer.line)
        elif c == '}':
            break

        collector.feed(c)

    return collector.finish()
