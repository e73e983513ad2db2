import struct

import pytest


def _pack_header(block_type='D', data_name='VEL', reserved=b'\x00\x00\x00\x00',
                 gate_count=2, range_raw=1000, interval_raw=4000, tover_raw=0,
                 snr_raw=0, control_flags=0, word_size=8, scale=1.0, offset=0.0,
                 byte_order='>'):
    return struct.pack(
        byte_order + '1s3s4sHHHHHBBff',
        block_type.encode('ascii'), data_name.encode('ascii'), reserved,
        gate_count, range_raw, interval_raw, tover_raw, snr_raw,
        control_flags, word_size, scale, offset,
    )


@pytest.fixture
def pack_header():
    """Factory packing a 28-byte moment header."""
    return _pack_header


@pytest.fixture
def sentinel_bytes():
    """Tag of the velocity data block, a default sentinel."""
    return b'DVEL'
