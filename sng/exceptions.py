class SNGException(Exception):
    '''Base class to extend in order to throw exception in sng.

    It takes the message to report and, optionally, the line of the source
    where the problem was detected; if the line is missing the compiler fills
    it in with the position of the lexer before reporting.
    '''

    def __init__(self, message, line=None):
        self.message = message
        self.line = line
        super().__init__(message)

    def __str__(self):
        return self.message


class LexException(SNGException):
    pass


class SyntaxException(SNGException):
    pass


class UnexpectedTokenException(SyntaxException):
    pass


class MissingDelimiterException(SyntaxException):
    pass


class UnexpectedEOFException(SyntaxException):
    pass


class MalformedDataException(SyntaxException):
    '''A data segment contains something outside the active alphabet.'''
    pass


class SemanticException(SNGException):
    pass


class UnknownChunkException(SemanticException):

    def __init__(self, token, line=None):
        self.token = token
        super().__init__(f'unknown chunk type `{token}\'', line=line)


class RepeatedChunkException(SemanticException):
    pass


class OrderingException(SemanticException):
    pass


class IncompleteException(SemanticException):
    pass


class RangeException(SemanticException):
    pass


class SizeMismatchException(SemanticException):
    pass


class ColorTypeException(SemanticException):
    '''The chunk doesn't apply to the color type declared in IHDR.'''
    pass


class NotImplementedChunkException(SNGException, NotImplementedError):
    '''The chunk type is part of the vocabulary but there is no compiler for it.'''
    pass


class BackendException(SNGException):
    '''This is raised by the PNG writer, never by the grammar.'''
    pass
