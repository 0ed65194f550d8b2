'''
Tokenizer for the SNG notation.

A token is either a quoted string, a run of characters that are not
punctuation (a dot is accepted inside a run so that floating point
numbers are a single token) or a single punctuation character.
Comments start with '#' and go on until the end of the line.
'''
import logging
import string

from .model import Token
from .streams import Stream
from .exceptions import (
    LexException,
    UnexpectedEOFException,
    UnexpectedTokenException,
)


MAX_TOKEN_LENGTH = 80

PUNCTUATION = frozenset(string.punctuation)
WHITESPACE = frozenset(string.whitespace)
QUOTES = ('"', '\'')

# line reported once the whole input has been consumed
EOF = 'EOF'


class Lexer(object):

    def __init__(self, source):
        self.logger = logging.getLogger(f'{self.__module__}.{self.__class__.__name__}')
        self.stream = source if isinstance(source, Stream) else Stream(source)
        self.line = 1
        self.token = None
        self._pushed = False

    def read_char(self):
        '''Raw access to the input, used by the data segments.'''
        c = self.stream.getc()
        if c == '\n':
            self.line += 1

        return c

    def _too_long(self, buffer, message):
        if len(buffer) >= MAX_TOKEN_LENGTH:
            raise LexException(message, line=self.line)

    def _read_string(self, quote):
        buffer = []
        while True:
            c = self.stream.getc()
            if c == '':
                raise LexException('unterminated string', line=self.line)
            elif c == quote:
                break
            elif c == '\n':
                raise LexException('runaway string', line=self.line)

            self._too_long(buffer, 'string token too long')
            buffer.append(c)

        return ''.join(buffer)

    def _read_word(self, first):
        buffer = [first]
        while True:
            c = self.stream.getc()
            if c == '':
                break
            elif c in WHITESPACE:
                if c == '\n':
                    self.line += 1
                break
            elif c in PUNCTUATION and c != '.':
                self.stream.ungetc(c)
                break

            self._too_long(buffer, 'token too long')
            buffer.append(c)

        return ''.join(buffer)

    def next_token(self):
        '''Return the next Token or None if the input is finished.'''
        if self._pushed:
            self._pushed = False
            self.logger.debug('saved token: %s', self.token.text)
            return self.token

        # skip leading whitespace and comments
        while True:
            c = self.stream.getc()
            if c == '':
                return None
            elif c == '\n':
                self.line += 1
            elif c in WHITESPACE:
                continue
            elif c == '#':
                while c not in ('', '\n'):
                    c = self.stream.getc()
                if c == '\n':
                    self.line += 1
            else:
                break

        line = self.line
        if c in QUOTES:
            self.token = Token(self._read_string(c), line, True)
        elif c in PUNCTUATION:
            self.token = Token(c, line, False)
        else:
            self.token = Token(self._read_word(c), line, False)

        self.logger.debug('token: %s', self.token.text)

        return self.token

    def push_token(self):
        '''Push back the last token; must always be followed immediately by next_token()'''
        if self._pushed or self.token is None:
            raise RuntimeError('there is no token to push back')

        self.logger.debug('pushing token: %s', self.token.text)
        self._pushed = True

    def equals(self, token, text):
        return token is not None and not token.quoted and token.text == text

    def next_inner_token(self):
        '''Get a token within a chunk specification: None means that the
        closing delimiter has been reached.'''
        token = self.next_token()
        if token is None:
            raise UnexpectedEOFException('unexpected EOF', line=self.line)

        return None if self.equals(token, '}') else token

    def require(self, text):
        '''Croak if the next token doesn't match what we expect'''
        token = self.next_token()
        if token is None:
            raise UnexpectedEOFException('unexpected EOF', line=self.line)
        elif not self.equals(token, text):
            raise UnexpectedTokenException(f'unexpected token {token.text}', line=token.line)

        return token
