import struct

import pytest


@pytest.fixture
def caf_preamble():
    def _preamble(file_type=b'caff', version=1, flags=0):
        return file_type + struct.pack('>HH', version, flags)

    return _preamble


@pytest.fixture
def caf_chunk():
    '''Build a chunk: the size is the one of the payload unless given explicitly.'''
    def _chunk(tag, payload=b'', size=None):
        return tag + struct.pack('>q', len(payload) if size is None else size) + payload

    return _chunk


@pytest.fixture
def caf_description():
    def _description(sample_rate=44100.0, format_id=b'lpcm', format_flags=0,
                     bytes_per_packet=4, frames_per_packet=1, channels=2, bits=16):
        return struct.pack(
            '>d4sIIIII',
            sample_rate,
            format_id,
            format_flags,
            bytes_per_packet,
            frames_per_packet,
            channels,
            bits,
        )

    return _description


@pytest.fixture
def minimal_caf(caf_preamble, caf_chunk, caf_description):
    '''Stereo 16 bits linear PCM with four frames of audio.'''
    return (
        caf_preamble()
        + caf_chunk(b'desc', caf_description())
        + caf_chunk(b'data', b'\x00\x00\x00\x00' + b'\x01\x02' * 8)
    )
