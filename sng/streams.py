import io
import logging

from .exceptions import LexException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file object to
    uniform its properties: the lexer needs to read one character at
    a time and to put back the last one it has read.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a binary file object'''
        self._type = type(obj)
        self._owned = False
        self._pushed = None
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            if not hasattr(self.obj, 'read'):
                raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self._type.__name__)
            init_method = self.init_file

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        try:
            self.obj = open(self.obj, 'rb')
        except OSError as e:
            raise LexException(f'can\'t open {self.obj}: {e.strerror}')
        self._owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_TextIOWrapper(self):
        '''stdin and files opened in text mode: use the underlying buffer'''
        self.obj = self.obj.buffer

    def init_file(self):
        pass

    def close(self):
        if self._owned:
            self.obj.close()

    def getc(self):
        '''Return the next character or the empty string at the end of the stream.'''
        if self._pushed is not None:
            c, self._pushed = self._pushed, None
            return c

        try:
            return self.obj.read(1).decode('latin1')
        except OSError as e:
            raise LexException(f'read error: {e}')

    def ungetc(self, c):
        if self._pushed is not None:
            raise RuntimeError('only one character of push-back is possible')
        self._pushed = c
