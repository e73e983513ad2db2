"""
Byte cursor for NEXRAD Level-II message buffers.

This module provides the ByteReader class, a forward reading cursor over an
in-memory buffer with consuming reads, a non-consuming uint32 peek and exact
forward/backward stepping.
"""

import struct
from typing import Any, Optional, Tuple, Union

from .constants import BYTE_ORDER


class ReadExhaustedError(ValueError):
    """Raised when the buffer cannot satisfy a read or a cursor move."""


class ByteReader:
    """
    Cursor over a byte buffer.

    Peeks never move the cursor and ``retreat(n)`` exactly undoes
    ``advance(n)``.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], position: int = 0,
                 byte_order: str = BYTE_ORDER):
        """
        Initialize ByteReader.

        Args:
            data: Buffer to read from
            position: Initial cursor position in bytes (default: 0)
            byte_order: struct byte order character, '>' or '<' (default: '>')
        """
        if byte_order not in ('>', '<'):
            raise ValueError(f'Invalid byte order: {byte_order}')

        self._data = memoryview(data).cast('B')
        self._byte_order = byte_order
        self._position = 0
        self.seek(position)

    @property
    def byte_order(self) -> str:
        """Get the struct byte order character."""
        return self._byte_order

    def __len__(self) -> int:
        return len(self._data)

    def tell(self) -> int:
        """Get the current cursor position."""
        return self._position

    def remaining(self) -> int:
        """Get the number of unread bytes."""
        return len(self._data) - self._position

    def seek(self, position: int) -> None:
        """
        Move the cursor to an absolute position.

        Args:
            position: Target position in bytes

        Raises:
            ReadExhaustedError: If position lies outside the buffer
        """
        if not 0 <= position <= len(self._data):
            raise ReadExhaustedError(
                f'Position {position} outside buffer of {len(self._data)} bytes')
        self._position = position

    def advance(self, count: int) -> None:
        """Step the cursor forward by count bytes."""
        if count < 0:
            raise ValueError(f'Invalid step: {count}')
        self.seek(self._position + count)

    def retreat(self, count: int) -> None:
        """Step the cursor backward by count bytes."""
        if count < 0:
            raise ValueError(f'Invalid step: {count}')
        self.seek(self._position - count)

    def _take(self, count: int) -> bytes:
        end = self._position + count
        if end > len(self._data):
            raise ReadExhaustedError(
                f'Cannot read {count} bytes at position {self._position}: '
                f'{self.remaining()} bytes left')
        chunk = self._data[self._position:end].tobytes()
        self._position = end
        return chunk

    def unpack(self, fmt: str) -> Tuple[Any, ...]:
        """
        Consume and unpack a struct format in the reader's byte order.

        Args:
            fmt: struct format without byte order prefix

        Returns:
            Tuple of unpacked values
        """
        layout = struct.Struct(self._byte_order + fmt)
        return layout.unpack(self._take(layout.size))

    def read_bytes(self, count: int) -> bytes:
        """Consume count raw bytes."""
        return self._take(count)

    def read_string(self, count: int) -> str:
        """Consume count bytes as an ASCII string."""
        return self._take(count).decode('ascii', errors='replace')

    def read_uint8(self) -> int:
        return self.unpack('B')[0]

    def read_uint16(self) -> int:
        return self.unpack('H')[0]

    def read_uint32(self) -> int:
        return self.unpack('I')[0]

    def read_float(self) -> float:
        """Consume a 32-bit IEEE float."""
        return self.unpack('f')[0]

    def peek_uint32(self, byte_order: Optional[str] = None) -> int:
        """
        Read a uint32 at the cursor without consuming it.

        Args:
            byte_order: struct byte order character overriding the
                reader's own (default: None)

        Returns:
            Unsigned 32-bit value

        Raises:
            ReadExhaustedError: If fewer than 4 bytes remain
        """
        if self.remaining() < 4:
            raise ReadExhaustedError(
                f'Cannot peek 4 bytes at position {self._position}: '
                f'{self.remaining()} bytes left')
        if byte_order is None:
            byte_order = self._byte_order
        elif byte_order not in ('>', '<'):
            raise ValueError(f'Invalid byte order: {byte_order}')
        return struct.unpack_from(byte_order + 'I', self._data, self._position)[0]
