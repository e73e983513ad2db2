"""
Test module for the ByteReader cursor.
"""

import struct

import pytest

from nexpyx.bytereader import ByteReader, ReadExhaustedError


class TestReads:
    """Test cases for consuming reads."""

    def test_typed_reads_big_endian(self):
        data = b'D' + b'VEL' + struct.pack('>BHIf', 7, 513, 1146504524, 1.5)
        reader = ByteReader(data)

        assert reader.read_string(1) == 'D'
        assert reader.read_string(3) == 'VEL'
        assert reader.read_uint8() == 7
        assert reader.read_uint16() == 513
        assert reader.read_uint32() == 1146504524
        assert reader.read_float() == 1.5
        assert reader.remaining() == 0

    def test_little_endian(self):
        reader = ByteReader(struct.pack('<H', 513), byte_order='<')
        assert reader.read_uint16() == 513

    def test_read_bytes(self):
        reader = ByteReader(b'\x01\x02\x03\x04\x05')
        assert reader.read_bytes(4) == b'\x01\x02\x03\x04'
        assert reader.tell() == 4

    def test_read_past_end_raises(self):
        reader = ByteReader(b'\x01')
        with pytest.raises(ReadExhaustedError):
            reader.read_uint16()
        # A failed read leaves the cursor in place
        assert reader.tell() == 0

    def test_read_exhausted_is_value_error(self):
        with pytest.raises(ValueError):
            ByteReader(b'').read_uint8()

    def test_invalid_byte_order(self):
        with pytest.raises(ValueError):
            ByteReader(b'', byte_order='!')


class TestPeekAndStep:
    """Test cases for peek and cursor stepping."""

    @pytest.fixture
    def reader(self):
        return ByteReader(b'\x00DVEL\x00\x00')

    def test_peek_does_not_move(self, reader):
        reader.advance(1)
        assert reader.peek_uint32() == struct.unpack('>I', b'DVEL')[0]
        assert reader.peek_uint32() == struct.unpack('>I', b'DVEL')[0]
        assert reader.tell() == 1

    def test_peek_byte_order_override(self):
        reader = ByteReader(b'DVEL', byte_order='<')
        assert reader.peek_uint32() == struct.unpack('<I', b'DVEL')[0]
        assert reader.peek_uint32(byte_order='>') == struct.unpack('>I', b'DVEL')[0]
        assert reader.tell() == 0

    def test_peek_short_buffer_raises(self, reader):
        reader.seek(4)
        with pytest.raises(ReadExhaustedError):
            reader.peek_uint32()
        assert reader.tell() == 4

    @pytest.mark.parametrize('count', [0, 1, 3, 7])
    def test_retreat_undoes_advance(self, reader, count):
        start = reader.tell()
        reader.advance(count)
        assert reader.tell() == start + count
        reader.retreat(count)
        assert reader.tell() == start

    def test_advance_past_end_raises(self, reader):
        with pytest.raises(ReadExhaustedError):
            reader.advance(8)
        assert reader.tell() == 0

    def test_retreat_before_start_raises(self, reader):
        with pytest.raises(ReadExhaustedError):
            reader.retreat(1)

    def test_negative_step_rejected(self, reader):
        with pytest.raises(ValueError):
            reader.advance(-1)

    def test_initial_position(self):
        reader = ByteReader(b'\x00\x01\x02', position=2)
        assert reader.read_uint8() == 2
        assert len(reader) == 3
