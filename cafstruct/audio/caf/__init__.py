'''
# Core Audio Format

Container for audio created by Apple: the file header is followed by a
sequence of chunks, each one with a four-character code, a size and a data
section. All the fields are big-endian, with the exception of the audio data
whose byte order depends on the data format.

Every CAF file must have

 1. an Audio Description chunk ('desc'), as first chunk
 2. an Audio Data chunk ('data'), anywhere after it; if its size is -1 it
    extends up to the end of the file and so must be the last one
 3. a Packet Table chunk ('pakt') if packets vary in size or in number of frames
 4. a Channel Layout chunk ('chan') if there are more than two channels

Apple documents the format at
<https://developer.apple.com/library/archive/documentation/MusicAudio/Reference/CAFSpec/>.

'''
import logging
from typing import NamedTuple, Optional, Tuple

from ...core import Chunk
from ... import fields
from ...properties import Dependency
from .enum import (
    CAFChunkType,
    CAFAudioFormatID,
    CAFLinearPCMFormatFlag,
    CAFChannelLayoutTag,
    CAFChannelBitmap,
    CAFChannelLabel,
    CAFChannelFlags,
)
from .exceptions import (
    InvalidFileType,
    UnsupportedFileVersion,
    InvalidFileFlags,
    UnexpectedChunkSize,
    InvalidChunkSize,
    MalformedStringTable,
    UnsupportedChunkType,
    DuplicateChunk,
    OutOfOrderChunk,
    MissingRequiredChunk,
)
from .utils import (
    CAFPacket,
    decode_packet_table,
    get_chunk_by_type,
    get_chunks_by_type,
)
from .walker import (
    SIZE_TO_END_OF_STREAM,
    ChunkMetadata,
    iter_chunks,
)


logger = logging.getLogger(__name__)

BE = fields.Endianess.BIG_ENDIAN


class CAFFileHeader(Chunk):
    '''
    The file type must be 'caff'; for the version 1 of the format, the only
    one existing, the flags must be zero.
    '''
    file_type    = fields.StringField(4, default=b'caff')
    file_version = fields.StructField('H', default=1, endianess=BE)
    file_flags   = fields.StructField('H', endianess=BE)

    def validate(self):
        if self.file_type.value != b'caff':
            raise InvalidFileType(self.file_type.value)

        version = self.file_version.value
        if version != 1:
            raise UnsupportedFileVersion(version)

        if self.file_flags.value != 0:
            raise InvalidFileFlags(self.file_flags.value, version)

        return True


class CAFAudioDescription(Chunk):
    '''
    Describes the format of the audio data: for formats with a variable packet
    size, or a variable number of frames per packet, the corresponding field is
    zero and the file must include a Packet Table chunk.
    '''
    SIZE = 32

    sample_rate        = fields.StructField('d', endianess=BE)
    format_id          = fields.StructField('I', enum=CAFAudioFormatID, endianess=BE)
    format_flags       = fields.StructField('I', endianess=BE)
    bytes_per_packet   = fields.StructField('I', endianess=BE)
    frames_per_packet  = fields.StructField('I', endianess=BE)
    channels_per_frame = fields.StructField('I', endianess=BE)
    bits_per_channel   = fields.StructField('I', endianess=BE)

    def __str__(self):
        return '%s %gHz %dch %dbit' % (
            self.format_id.value.name if isinstance(self.format_id.value, CAFAudioFormatID) else hex(self.format_id.value),
            self.sample_rate.value,
            self.channels_per_frame.value,
            self.bits_per_channel.value,
        )

    @property
    def requires_packet_table(self):
        return self.bytes_per_packet.value == 0 or self.frames_per_packet.value == 0

    @property
    def linear_pcm_flags(self):
        '''The format flags have a meaning only for linear PCM.'''
        if self.format_id.value != CAFAudioFormatID.LINEAR_PCM:
            return None

        return CAFLinearPCMFormatFlag(self.format_flags.value & 0x3)


class CAFChannelDescription(Chunk):
    channel_label = fields.StructField('I', enum=CAFChannelLabel, endianess=BE)
    channel_flags = fields.StructField('I', enum=CAFChannelFlags, endianess=BE)
    coordinate_x  = fields.StructField('f', endianess=BE)
    coordinate_y  = fields.StructField('f', endianess=BE)
    coordinate_z  = fields.StructField('f', endianess=BE)

    @property
    def coordinates(self):
        return (self.coordinate_x.value, self.coordinate_y.value, self.coordinate_z.value)


class CAFChannelLayout(Chunk):
    '''
    The layout tag identifies a standard layout; USE_CHANNEL_BITMAP means the
    bitmap tells which channels are present and USE_CHANNEL_DESCRIPTIONS that
    one description per channel follows.
    '''
    layout_tag                  = fields.StructField('I', enum=CAFChannelLayoutTag, endianess=BE)
    channel_bitmap              = fields.StructField('I', enum=CAFChannelBitmap, endianess=BE)
    number_channel_descriptions = fields.StructField('I', endianess=BE)
    channel_descriptions        = fields.ArrayField(CAFChannelDescription(), n=Dependency('.number_channel_descriptions'))


class CAFInformation(Chunk):
    '''
    Key/value pairs of null-terminated UTF-8 strings; the data section can be
    larger than its content to reserve room for more entries.
    '''
    number_entries = fields.StructField('I', endianess=BE)
    table          = fields.PaddingField()

    @property
    def strings(self):
        return [_.decode('utf-8', errors='replace') for _ in self.table.value.split(b'\x00') if _]

    def to_dict(self):
        strings = self.strings
        return dict(zip(strings[0::2], strings[1::2]))

    def validate(self):
        expected = 2 * self.number_entries.value
        actual = len(self.strings)

        if actual != expected:
            raise MalformedStringTable(expected, actual)

        return True


class CAFPacketTable(Chunk):
    '''
    The header is followed by the entries describing the size and/or the
    number of frames of each packet, encoded as variable-length integers; they
    are kept as they are and decoded by packets().
    '''
    number_packets      = fields.StructField('q', endianess=BE)
    number_valid_frames = fields.StructField('q', endianess=BE)
    priming_frames      = fields.StructField('i', endianess=BE)
    remainder_frames    = fields.StructField('i', endianess=BE)
    table               = fields.PaddingField()

    def packets(self, description: CAFAudioDescription):
        return decode_packet_table(
            self.table.value,
            self.number_packets.value,
            description.bytes_per_packet.value,
            description.frames_per_packet.value,
        )


class CAFMagicCookie(Chunk):
    '''Codec-specific data, opaque for us.'''
    cookie = fields.PaddingField()


class CAFChunk(NamedTuple):
    metadata: ChunkMetadata
    data: Optional[Chunk]


UNIQUE_CHUNKS = (
    CAFChunkType.AUDIO_DESCRIPTION,
    CAFChunkType.AUDIO_DATA,
    CAFChunkType.PACKET_TABLE,
    CAFChunkType.CHANNEL_LAYOUT,
    CAFChunkType.MAGIC_COOKIE,
)


class CAFChunksField(fields.Field):
    '''All the chunks following the file header, in the order they appear.

    Each chunk is dispatched to the method named handle_<kind> (see CAFChunkType),
    the chunks with an unknown type go to handle_unknown() and the documented
    ones we don't decode to handle_unsupported().

    The rules about order and multiplicity are checked as soon as a chunk
    shows up, the ones involving the whole file by CAFFile.validate().
    '''

    def __init__(self, **kw):
        kw.setdefault('default', ())
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({list(self.value)!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def _get_size(self):
        return sum(_.metadata.total_size or 0 for _ in self.value)

    @property
    def strict(self):
        return getattr(self.father, 'strict', False)

    def unpack(self, stream):
        chunks = []

        for index, metadata, cursor in iter_chunks(stream, offset=stream.tell()):
            kind = metadata.kind

            if index == 0 and kind is not CAFChunkType.AUDIO_DESCRIPTION:
                raise OutOfOrderChunk(CAFChunkType.AUDIO_DESCRIPTION, metadata.tag, index)

            if metadata.size < SIZE_TO_END_OF_STREAM \
                    or (metadata.extends_to_end and kind is not CAFChunkType.AUDIO_DATA):
                raise InvalidChunkSize(metadata.tag, metadata.size)

            if kind in UNIQUE_CHUNKS and get_chunk_by_type(chunks, kind):
                raise DuplicateChunk(kind)

            if kind is None:
                handler = self.handle_unknown
            else:
                handler = getattr(self, 'handle_%s' % kind.name.lower(), self.handle_unsupported)

            data = handler(metadata, index, cursor)

            chunks.append(CAFChunk(metadata, data))

        self.value = tuple(chunks)

    def read_data(self, metadata, cursor):
        '''The decoders see only the data section of their chunk.'''
        return cursor.read_exactly(metadata.size)

    def handle_audio_description(self, metadata, index, cursor):
        if metadata.size != CAFAudioDescription.SIZE:
            raise UnexpectedChunkSize(metadata.size, CAFChunkType.AUDIO_DESCRIPTION, CAFAudioDescription.SIZE)

        description = CAFAudioDescription(self.read_data(metadata, cursor))
        self.logger.debug('audio description: %s' % description)

        return description

    def handle_audio_data(self, metadata, index, cursor):
        # the audio is left where it is, only its position is recorded
        return None

    def handle_channel_layout(self, metadata, index, cursor):
        layout = CAFChannelLayout(self.read_data(metadata, cursor))
        self.logger.debug('channel layout tag: %r bitmap: %r descriptions: %r' % (
            layout.layout_tag.value,
            layout.channel_bitmap.value,
            layout.channel_descriptions.value,
        ))

        return layout

    def handle_information(self, metadata, index, cursor):
        return CAFInformation(self.read_data(metadata, cursor))

    def handle_packet_table(self, metadata, index, cursor):
        return CAFPacketTable(self.read_data(metadata, cursor))

    def handle_magic_cookie(self, metadata, index, cursor):
        return CAFMagicCookie(self.read_data(metadata, cursor))

    def handle_free(self, metadata, index, cursor):
        return None

    def handle_unknown(self, metadata, index, cursor):
        self.logger.debug('skipping unknown chunk %r' % (metadata,))
        return None

    def handle_unsupported(self, metadata, index, cursor):
        if self.strict:
            raise UnsupportedChunkType(metadata.kind)

        self.logger.warning('chunk %s is not decoded, skipping %r' % (metadata.kind.name, metadata))
        return None


class CAFFile(Chunk):
    '''
    A parsed CAF file: constructing it from a path, bytes or a file object
    either succeeds with a file respecting all the rules of the format or
    raises the first violation found.

    With strict=True the documented chunks we don't decode (markers, regions, ...)
    make the parsing fail instead of being skipped.
    '''
    header = CAFFileHeader()
    chunks = CAFChunksField()

    def __init__(self, filepath=None, strict=False, **kwargs):
        self.strict = strict
        super().__init__(filepath, **kwargs)

    def get_chunk(self, kind: CAFChunkType) -> Optional[CAFChunk]:
        return get_chunk_by_type(self.chunks.value, kind)

    def get_chunks(self, kind: Optional[CAFChunkType]) -> Tuple[CAFChunk, ...]:
        return tuple(get_chunks_by_type(self.chunks.value, kind))

    def _get_data(self, kind):
        chunk = self.get_chunk(kind)
        return chunk.data if chunk else None

    @property
    def audio_description(self) -> Optional[CAFAudioDescription]:
        return self._get_data(CAFChunkType.AUDIO_DESCRIPTION)

    @property
    def audio_data(self) -> Optional[ChunkMetadata]:
        chunk = self.get_chunk(CAFChunkType.AUDIO_DATA)
        return chunk.metadata if chunk else None

    @property
    def packet_table(self) -> Optional[CAFPacketTable]:
        return self._get_data(CAFChunkType.PACKET_TABLE)

    @property
    def channel_layout(self) -> Optional[CAFChannelLayout]:
        return self._get_data(CAFChunkType.CHANNEL_LAYOUT)

    @property
    def magic_cookie(self) -> Optional[CAFMagicCookie]:
        return self._get_data(CAFChunkType.MAGIC_COOKIE)

    @property
    def information(self) -> Tuple[CAFInformation, ...]:
        return tuple(_.data for _ in self.get_chunks(CAFChunkType.INFORMATION))

    @property
    def free_chunks(self) -> Tuple[ChunkMetadata, ...]:
        return tuple(_.metadata for _ in self.get_chunks(CAFChunkType.FREE))

    @property
    def unknown_chunks(self) -> Tuple[ChunkMetadata, ...]:
        return tuple(_.metadata for _ in self.get_chunks(None))

    @property
    def unsupported_chunks(self) -> Tuple[ChunkMetadata, ...]:
        return tuple(
            _.metadata for _ in self.chunks.value
            if _.metadata.kind is not None and _.metadata.kind not in UNIQUE_CHUNKS
            and _.metadata.kind not in (CAFChunkType.INFORMATION, CAFChunkType.FREE)
        )

    @property
    def packets(self) -> Tuple[CAFPacket, ...]:
        if self.packet_table is None:
            return ()

        return tuple(self.packet_table.packets(self.audio_description))

    @property
    def duration(self) -> Optional[float]:
        '''Duration in seconds, when it can be known without looking at the audio.'''
        description = self.audio_description
        sample_rate = description.sample_rate.value

        if not sample_rate:
            return None

        if self.packet_table is not None:
            return self.packet_table.number_valid_frames.value / sample_rate

        data = self.audio_data
        if data.extends_to_end or description.requires_packet_table:
            return None

        # the data section starts with the edit count
        packets = max(data.size - 4, 0) // description.bytes_per_packet.value

        return packets * description.frames_per_packet.value / sample_rate

    def validate(self):
        description = self.audio_description
        if description is None:
            raise MissingRequiredChunk(CAFChunkType.AUDIO_DESCRIPTION)

        channels = description.channels_per_frame.value
        layout = self.channel_layout

        if channels > 2 and layout is None:
            raise MissingRequiredChunk(CAFChunkType.CHANNEL_LAYOUT)

        if description.requires_packet_table and self.packet_table is None:
            raise MissingRequiredChunk(CAFChunkType.PACKET_TABLE)

        if self.audio_data is None:
            raise MissingRequiredChunk(CAFChunkType.AUDIO_DATA)

        if layout is not None \
                and layout.layout_tag.value == CAFChannelLayoutTag.USE_CHANNEL_DESCRIPTIONS \
                and layout.number_channel_descriptions.value != channels:
            logger.warning('channel layout describes %d channels, the audio has %d' % (
                layout.number_channel_descriptions.value, channels))

        return True
