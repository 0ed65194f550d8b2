'''
The compiler itself: reads the chunk specifications one after the other,
checks they are allowed at that point of the stream and dispatches each
one to its chunk compiler.

Any error is fatal: the exception travels up to sngc() that reports it as

    <source>:<line>: <message>

and returns an exit status telling apart the errors in the source from
the ones of the PNG writer.
'''
import io
import logging
import sys

from .lexer import Lexer, EOF
from .model import ImageDescription, ColorMask
from .vocabulary import Vocabulary
from .png.writer import PNGWriter
from .exceptions import (
    BackendException,
    IncompleteException,
    MissingDelimiterException,
    SNGException,
    UnexpectedEOFException,
    UnknownChunkException,
)


EXIT_SUCCESS = 0
EXIT_FAILURE = 1  # error in the source
EXIT_BACKEND = 2  # error writing the PNG


class CompileContext(object):
    '''Everything a compilation needs: nothing is shared between two of them.'''

    def __init__(self, fin, fout, source='stdin'):
        self.source = source
        self.lexer = Lexer(fin)
        self.image = ImageDescription()
        self.vocabulary = Vocabulary()
        self.writer = PNGWriter(fout)
        self.previous = None


class Compiler(object):

    def __init__(self, fin, fout, source='stdin'):
        self.logger = logging.getLogger(f'{self.__module__}.{self.__class__.__name__}')
        self.context = CompileContext(fin, fout, source=source)

    @property
    def image(self):
        return self.context.image

    def dispatch(self, token):
        '''Compile the chunk whose keyword is the token passed as argument'''
        context = self.context
        lexer = context.lexer

        entry = context.vocabulary.get(token.text) if not token.quoted else None
        if entry is None:
            raise UnknownChunkException(token.text, line=token.line)

        delimiter = lexer.next_token()
        if delimiter is None:
            raise UnexpectedEOFException('unexpected EOF')
        if not lexer.equals(delimiter, '{'):
            raise MissingDelimiterException('missing chunk delimiter', line=delimiter.line)

        context.vocabulary.check(entry, context)

        entry.compiler(context)

        self.logger.debug('%s specification processed', entry.name)
        context.vocabulary.record(entry)
        context.previous = entry.name

    def check_end(self):
        '''end-of-file sanity checks'''
        image, vocabulary = self.context.image, self.context.vocabulary

        if image.color_type & ColorMask.PALETTE and not vocabulary.count('PLTE'):
            raise IncompleteException('palette property set, but no PLTE chunk found')
        if not vocabulary.pixel_data:
            raise IncompleteException('no image data')

    def run(self):
        '''Compile the whole input, the exceptions are raised with the line set.'''
        lexer = self.context.lexer

        try:
            while (token := lexer.next_token()) is not None:
                self.dispatch(token)

            lexer.line = EOF
            self.check_end()

            self.context.writer.write_end()
        except SNGException as e:
            if e.line is None:
                e.line = lexer.line
            raise
        finally:
            lexer.stream.close()

        return self.context.image


def format_diagnostic(source, exc):
    if exc.line is None:
        return '%s: %s' % (source, exc.message)

    return '%s:%s: %s' % (source, exc.line, exc.message)


def sngc(fin, source, fout, err=None):
    '''Compile SNG from fin to PNG on fout, reporting errors on err.

    Returns EXIT_SUCCESS, EXIT_FAILURE for errors in the source or
    EXIT_BACKEND if the PNG writer failed. The output is not usable
    if the compilation failed.'''
    err = err if err is not None else sys.stderr

    try:
        Compiler(fin, fout, source=source).run()
    except SNGException as e:
        err.write(format_diagnostic(source, e) + '\n')
        return EXIT_BACKEND if isinstance(e, BackendException) else EXIT_FAILURE

    return EXIT_SUCCESS


def compile_bytes(data, source='<string>'):
    '''Compile the SNG source passed as bytes (or str), returning the
    image description and the PNG data. Errors are raised.'''
    if isinstance(data, str):
        data = data.encode('utf-8')

    fout = io.BytesIO()
    image = Compiler(data, fout, source=source).run()

    return image, fout.getvalue()
