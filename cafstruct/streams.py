import io
import logging
import os
from contextlib import contextmanager

from .exceptions import StreamException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file objects to
    uniform their properties: all the formats read from a Stream.

    A path is opened (and closed) by the Stream itself, a file object
    given by the caller is never closed here.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self._owned = False
        self.flags = flags
        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            if not hasattr(self.obj, 'read'):
                raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self.obj.__class__.__name__)
            init_method = self.init_file

        init_method()

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.obj)

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __del__(self):
        if self.__dict__.get('_owned'):
            self.obj.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')
        self._owned = True

    init_PosixPath = init_str
    init_WindowsPath = init_str

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    init_memoryview = init_bytearray

    def init_file(self):
        '''Something already readable and seekable'''
        logger.debug('using file object %r' % self.obj)

    def close(self):
        if self._owned:
            self.obj.close()
            self._owned = False

    def seek(self, offset, whence=os.SEEK_SET):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        return self.obj.seek(offset, whence)

    def tell(self):
        return self.obj.tell()

    def read(self, size=-1):
        return self.obj.read(size)

    def read_exactly(self, size):
        '''Read exactly size bytes or complain about it.'''
        offset = self.obj.tell()
        data = self.obj.read(size)

        if len(data) != size:
            raise StreamException(
                chain=[],
                message=f'expected {size} bytes at offset {offset}, got {len(data)}',
            )

        return data

    def read_all(self):
        '''Returns all the data from the actual position up to the end.'''
        return self.obj.read()

    def is_at_end(self):
        with self.preserve_position():
            return len(self.obj.read(1)) == 0

    @property
    def size(self):
        with self.preserve_position():
            return self.obj.seek(0, os.SEEK_END)

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)

    @contextmanager
    def preserve_position(self):
        self.save()
        try:
            yield self
        finally:
            self.restore()
