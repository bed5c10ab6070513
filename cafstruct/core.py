"""
Core module for the abstraction of a file format
"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk, Compliant
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
    MagicException,
)
from .properties import (
    get_root_from_chunk,
    Dependency,
    ChunkPhase,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    A Field made of other fields: the fields declared as class attributes
    are unpacked one after the other, in the order of declaration.

    A Chunk can contain sub-chunks, they become fathers of their fields so
    that a Dependency can find its way up to the root.

    Passing something to read from (a path, bytes or a file object) to the
    constructor unpacks the chunk right away.

    If the subclass defines a validate() method it's called once all the fields
    are unpacked: it can raise by itself or return False to signal a wrong magic.
    """

    def __init__(self, filepath=None, **kwargs):
        self.stream = None if filepath is None else Stream(filepath)

        super().__init__(**kwargs)

        if self.stream is not None:
            self.logger.debug('unpacking \'%s\' from %r' % (self.__class__.__name__, self.stream))
            self.unpack(self.stream)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_dependencies(self) -> Dict[str, Dependency]:
        result = super().get_dependencies()

        for field_name, field in self.get_fields():
            result.update({
                f'{field_name}.{key}': value for key, value in field.get_dependencies().items()
            })

        return result

    def __repr__(self):
        return '<%s(%s)>' % (
            self.__class__.__name__,
            ','.join('%s=%r' % (name, field) for name, field in self.get_fields()),
        )

    def __str__(self):
        return ''.join('%s: %r\n' % (name, field) for name, field in self.get_fields())

    def init(self):
        # accessing the descriptors creates this instance's own fields
        self.get_fields()

    def _get_value(self):
        return self

    @property
    def root(self):
        '''Obtain the final father of this chunk'''
        return get_root_from_chunk(self)

    def _get_size(self):
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        return b''.join(field.raw for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        '''Offset and size of each field, as found while unpacking.'''
        return {name: (field.offset, field.size) for name, field in self.get_fields()}

    def unpack_field(self, field_name, field, stream):
        '''Unpack a single field, remembering where it started. The failures of
        the fields below are re-raised with the name of this one appended to the chain.'''
        if field.offset:
            stream.seek(field.offset)

        offset = stream.tell()

        self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, offset))

        try:
            field.unpack(stream)
        except (UnpackException, ChunkUnpackException) as e:
            chain = e.chain if isinstance(e, ChunkUnpackException) else []
            raise ChunkUnpackException(chain=chain + [field_name]) from e

        field.offset = offset

    def unpack(self, stream):
        '''Read the representation given by the class from the stream.

        Passing a stream is mandatory since the sub-chunks can ask for offsets
        that are not contiguous, so we need to jump back and forth.
        '''
        self._phase = ChunkPhase.UNPACKING

        if self.offset is None:
            self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.unpack_field(field_name, field, stream)

        self._phase = ChunkPhase.DONE

        if hasattr(self, 'validate') and not self.validate():
            self.logger.warning(f'validation of \'{self.__class__.__name__}\' failed')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(chain=[])
