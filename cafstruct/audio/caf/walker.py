'''
Walking the chunks of a CAF file.

After the 8 bytes of the file header a CAF file is a plain sequence of chunks,
each one introduced by a 12 bytes header

    .-----------------------------.
    | mChunkType (4 bytes)        |
    | mChunkSize (int64, BE)      |
    |-----------------------------|
    | data section (mChunkSize)   |
    '-----------------------------'

The position of the next chunk is computed only from mChunkSize, never from
what the decoder of the data section consumed. A size of -1 means the data
section extends up to the end of the stream, so the chunk must be the last one.
'''
import logging
from typing import Iterator, NamedTuple, Optional, Tuple

from ...core import Chunk
from ... import fields
from ...exceptions import StreamException
from ...streams import Stream
from .enum import CAFChunkType
from .exceptions import InvalidChunkSize


logger = logging.getLogger(__name__)

CAF_FILE_HEADER_SIZE = 8
CAF_CHUNK_HEADER_SIZE = 12
SIZE_TO_END_OF_STREAM = -1


class CAFChunkHeader(Chunk):
    chunk_type = fields.StringField(4)
    chunk_size = fields.StructField('q', endianess=fields.Endianess.BIG_ENDIAN)


class ChunkMetadata(NamedTuple):
    '''Where a chunk starts (its header included) and what its header declares.'''
    offset: int
    tag: bytes
    size: int

    def __repr__(self):
        return f'<Chunk(offset={self.offset}, size={self.size}, type={self.tag!r})>'

    @property
    def kind(self) -> Optional[CAFChunkType]:
        '''The CAFChunkType of the chunk, None for tags we don't know about.'''
        try:
            return CAFChunkType(self.tag)
        except ValueError:
            return None

    @property
    def extends_to_end(self) -> bool:
        return self.size == SIZE_TO_END_OF_STREAM

    @property
    def data_offset(self) -> int:
        return self.offset + CAF_CHUNK_HEADER_SIZE

    @property
    def total_size(self) -> Optional[int]:
        if self.extends_to_end:
            return None

        return self.size + CAF_CHUNK_HEADER_SIZE


def iter_chunks(stream: Stream, offset: int = CAF_FILE_HEADER_SIZE) -> Iterator[Tuple[int, ChunkMetadata, Stream]]:
    '''Yield (index, metadata, cursor) for each chunk starting at offset.

    The cursor is the stream itself, positioned at the start of the data section,
    and it's valid only until the next iteration: whatever has been read from it,
    the walk continues from the offset declared by the chunk header.

    The declared size is checked only when the consumer asks for the next chunk,
    so it can look at every header first; a size below -1, or one running past
    the end of the stream, stops the walk.

    The walk ends at the end of the stream or right after a chunk with size -1.'''
    end = stream.size
    index = 0

    stream.seek(offset)

    while not stream.is_at_end():
        header = CAFChunkHeader()
        header.unpack(stream)

        metadata = ChunkMetadata(offset, header.chunk_type.value, header.chunk_size.value)

        logger.debug('found chunk #%d %r' % (index, metadata))

        yield index, metadata, stream

        if metadata.extends_to_end:
            logger.debug('chunk %r extends to the end of the stream, stop walking' % (metadata,))
            return

        if metadata.size < SIZE_TO_END_OF_STREAM:
            raise InvalidChunkSize(metadata.tag, metadata.size)

        if offset + metadata.total_size > end:
            raise StreamException(
                chain=[],
                message=f'chunk {metadata.tag!r} at offset {offset} declares {metadata.size} bytes '
                        f'but the stream ends at {end}',
            )

        offset += metadata.total_size
        stream.seek(offset)
        index += 1
