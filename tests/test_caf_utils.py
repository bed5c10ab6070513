import pytest

from cafstruct.audio.caf.enum import CAFAudioFormatID
from cafstruct.audio.caf.utils import (
    CAFPacket,
    decode_packet_table,
    fourcc,
    iter_varints,
)
from cafstruct.exceptions import UnpackException


@pytest.mark.parametrize('data,expected', [
    (b'\x01', [1]),
    (b'\x7f', [127]),
    (b'\x81\x00', [128]),
    (b'\xff\x7f', [16383]),
    (b'\x81\x80\x00', [16384]),
    (b'\x00\x81\x00\x05', [0, 128, 5]),
    (b'', []),
])
def test_varints(data, expected):
    assert list(iter_varints(data)) == expected


def test_varints_truncated():
    """The last byte has the continuation bit set."""
    with pytest.raises(UnpackException):
        list(iter_varints(b'\x01\x81'))


def test_packet_table_variable_size():
    packets = decode_packet_table(b'\x81\x00\x7f\x01', 3, bytes_per_packet=0, frames_per_packet=1024)

    assert packets == [
        CAFPacket(128, 1024),
        CAFPacket(127, 1024),
        CAFPacket(1, 1024),
    ]


def test_packet_table_variable_frames():
    packets = decode_packet_table(b'\x10\x20', 2, bytes_per_packet=64, frames_per_packet=0)

    assert packets == [
        CAFPacket(64, 16),
        CAFPacket(64, 32),
    ]


def test_packet_table_variable_both():
    """Each entry is a couple: size in bytes and then number of frames."""
    packets = decode_packet_table(b'\x0a\x81\x00\x0b\x7f', 2, bytes_per_packet=0, frames_per_packet=0)

    assert packets == [
        CAFPacket(10, 128),
        CAFPacket(11, 127),
    ]


def test_packet_table_extra_data():
    """Only the declared number of packets is decoded."""
    packets = decode_packet_table(b'\x01\x02\x03\x81', 2, bytes_per_packet=0, frames_per_packet=1)

    assert [_.size for _ in packets] == [1, 2]


def test_packet_table_constant():
    assert decode_packet_table(b'\x01\x02', 2, bytes_per_packet=4, frames_per_packet=1) == []


def test_packet_table_short():
    with pytest.raises(UnpackException):
        decode_packet_table(b'\x01', 2, bytes_per_packet=0, frames_per_packet=1)


def test_fourcc():
    assert fourcc(CAFAudioFormatID.LINEAR_PCM) == 'lpcm'
    assert fourcc(0x61616320) == 'aac '
    assert fourcc(b'desc') == 'desc'
