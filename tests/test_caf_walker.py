import pytest

from cafstruct.audio.caf.enum import CAFChunkType
from cafstruct.audio.caf.exceptions import InvalidChunkSize
from cafstruct.audio.caf.walker import ChunkMetadata, iter_chunks
from cafstruct.exceptions import StreamException
from cafstruct.streams import Stream


def walk(data):
    return [metadata for _, metadata, _ in iter_chunks(Stream(data))]


def test_walk(caf_preamble, caf_chunk):
    data = caf_preamble() + caf_chunk(b'free', b'\x00' * 4) + caf_chunk(b'zzzz', b'kebab')

    assert walk(data) == [
        ChunkMetadata(8, b'free', 4),
        ChunkMetadata(24, b'zzzz', 5),
    ]


def test_walk_no_chunks(caf_preamble):
    assert walk(caf_preamble()) == []


def test_walk_ignores_what_is_consumed(caf_preamble, caf_chunk):
    """Whatever is read from the cursor the next chunk is found where the header says."""
    data = caf_preamble() + caf_chunk(b'free', b'\x00' * 16) + caf_chunk(b'data', b'\x01')

    indexes = []
    for index, metadata, cursor in iter_chunks(Stream(data)):
        indexes.append(index)
        assert cursor.tell() == metadata.data_offset

        cursor.read(3)

    assert indexes == [0, 1]


def test_walk_stops_after_sentinel(caf_preamble, caf_chunk):
    data = (
        caf_preamble()
        + caf_chunk(b'data', size=-1)
        + b'\x00\x00\x00\x00'
        + caf_chunk(b'free', b'\x00')
    )

    chunks = walk(data)

    assert len(chunks) == 1
    assert chunks[0].extends_to_end
    assert chunks[0].total_size is None


def test_walk_can_stop_early(caf_preamble, caf_chunk):
    data = caf_preamble() + caf_chunk(b'free') + caf_chunk(b'free')

    for index, metadata, _ in iter_chunks(Stream(data)):
        break

    assert index == 0


def test_walk_invalid_size(caf_preamble, caf_chunk):
    with pytest.raises(InvalidChunkSize) as e:
        walk(caf_preamble() + caf_chunk(b'free', size=-2))

    assert e.value.size == -2


def test_walk_past_the_end(caf_preamble, caf_chunk):
    with pytest.raises(StreamException):
        walk(caf_preamble() + caf_chunk(b'free', b'\x00' * 4, size=100))


def test_walk_truncated_header(caf_preamble):
    with pytest.raises(StreamException):
        walk(caf_preamble() + b'free\x00\x00')


def test_chunk_metadata():
    metadata = ChunkMetadata(8, b'desc', 32)

    assert metadata.kind is CAFChunkType.AUDIO_DESCRIPTION
    assert metadata.data_offset == 20
    assert metadata.total_size == 44
    assert not metadata.extends_to_end

    assert ChunkMetadata(8, b'zzzz', 0).kind is None


@pytest.mark.parametrize('size', [-5, 100])
def test_walk_yields_before_checking_size(caf_preamble, caf_chunk, size):
    """The consumer sees the header of a chunk with a wrong size before the walk fails."""
    seen = []

    with pytest.raises((InvalidChunkSize, StreamException)):
        for _, metadata, _ in iter_chunks(Stream(caf_preamble() + caf_chunk(b'free', b'\x00' * 4, size=size))):
            seen.append(metadata)

    assert seen == [ChunkMetadata(8, b'free', size)]
