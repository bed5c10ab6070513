class CafstructException(Exception):
    '''Base class to extend in order to throw exception in cafstruct.

    It takes as first argument the chain of the layers that caused the
    exception, the innermost field first.
    '''

    def __init__(self, chain, message=None):
        self.chain = chain
        args = (message,) if message is not None else ()
        super().__init__(*args)


class UnpackException(CafstructException):
    pass


class MagicException(CafstructException):
    pass


class ChunkUnpackException(CafstructException):

    def __str__(self):
        return 'unable to unpack \'%s\'' % '.'.join(reversed(self.chain))


class StreamException(CafstructException):
    '''The stream doesn't contain the data it was supposed to contain:
    a read came back short or a seek pointed past its end.'''
    pass
