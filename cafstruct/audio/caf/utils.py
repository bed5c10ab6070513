import logging
from enum import Enum
from itertools import islice
from typing import Iterator, List, NamedTuple

from bitstring import ConstBitStream

from ...exceptions import UnpackException


logger = logging.getLogger(__name__)


class CAFPacket(NamedTuple):
    size: int
    frames: int


def fourcc(value) -> str:
    '''Four-character code of an integer (or of an enum wrapping one), like 'lpcm'.'''
    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, int):
        value = value.to_bytes(4, 'big')

    return value.decode('latin1')


def iter_varints(data: bytes) -> Iterator[int]:
    '''Each byte contains 7 bits of the integer and, in the high-order bit, a
    flag telling if the integer continues in the next byte: the first byte
    with the flag not set holds the last 7 bits.

        0x01           -> 1
        0x7f           -> 127
        0x81 0x00      -> 128
        0xff 0x7f      -> 16383
        0x81 0x80 0x00 -> 16384
    '''
    stream = ConstBitStream(data)

    value = 0
    pending = False

    while stream.pos < stream.len:
        more, bits = stream.readlist('uint:1, uint:7')
        value = (value << 7) | bits
        pending = bool(more)

        if not pending:
            yield value
            value = 0

    if pending:
        raise UnpackException(chain=[], message='the last variable-length integer is truncated')


def decode_packet_table(data: bytes, number_packets: int, bytes_per_packet: int, frames_per_packet: int) -> List[CAFPacket]:
    '''The entries of a packet table depend on what varies in the format:

     - bytes per packet is zero: one number per packet, its size in bytes
     - frames per packet is zero: one number per packet, its number of frames
     - both zero: a pair per packet, size in bytes and then number of frames

    the constant side is filled from the audio description. Formats with
    constant packets don't have entries at all.

    Only the first number_packets entries are valid, the data section can
    be longer than that.
    '''
    if bytes_per_packet and frames_per_packet:
        return []

    width = 2 if not bytes_per_packet and not frames_per_packet else 1

    varints = iter_varints(data)
    packets = []

    for index in range(number_packets):
        entry = tuple(islice(varints, width))

        if len(entry) != width:
            raise UnpackException(
                chain=[],
                message=f'packet table has {index} entries instead of {number_packets}',
            )

        if width == 2:
            size, frames = entry
        elif not bytes_per_packet:
            size, frames = entry[0], frames_per_packet
        else:
            size, frames = bytes_per_packet, entry[0]

        packets.append(CAFPacket(size, frames))

    logger.debug('decoded %d packets from %d bytes of packet table' % (len(packets), len(data)))

    return packets


def get_chunks_by_type(chunks, kind):
    return [_ for _ in chunks if _.metadata.kind is kind]


def get_chunk_by_type(chunks, kind):
    chunks = get_chunks_by_type(chunks, kind)

    return chunks[0] if chunks else None
