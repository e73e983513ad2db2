"""
Generic Data Moment block decoding for NEXRAD Level-II radials.

This module decodes one moment data block (reflectivity, velocity, ...) from
a Message Type 31 radial: the 28-byte header with its fixed-point fields,
range validation of the header, and the gate sample array, which may end
before the declared gate count when the next data block starts early.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union
import logging

import numpy as np

from .bytereader import ByteReader
from .constants import (
    BYTE_ORDER, DATA_BLOCK_SENTINELS, MOMENT_HEADER, MOMENT_HEADER_FIELDS,
    SCALE_FACTORS, WORD_SIZES
)
from .validation import ValidationError, validate_moment_header

logger = logging.getLogger(__name__)


class StopReason(Enum):
    """Why the sample scan ended."""
    GATE_COUNT_EXHAUSTED = 'gate_count_exhausted'
    SENTINEL_DETECTED = 'sentinel_detected'


@dataclass(frozen=True)
class MomentHeader:
    """
    Decoded 28-byte moment data header.

    Attributes:
        block_type: Data block type tag (1 char, 'D' for data moments)
        data_name: Moment name tag (3 chars, e.g. 'REF', 'VEL')
        reserved: Opaque reserved bytes
        gate_count: Declared number of range gates
        range: Range to the center of the first gate in km
        range_sample_interval: Gate spacing in km
        tover: Threshold parameter in dB
        snr_threshold: SNR threshold in dB
        control_flags: Control flags
        word_size: Bits per sample word (8 or 16)
        scale: Sample scale coefficient
        offset: Sample offset coefficient
    """
    block_type: str
    data_name: str
    reserved: bytes
    gate_count: int
    range: np.float32
    range_sample_interval: np.float32
    tover: np.float32
    snr_threshold: np.float32
    control_flags: int
    word_size: int
    scale: np.float32
    offset: np.float32

    @property
    def bytes_per_word(self) -> int:
        return self.word_size // 8


@dataclass(frozen=True, eq=False)
class MomentDataBlock:
    """
    Decoded moment data block.

    Holds the header fields, the rescaled gate samples and the number of
    declared gates that were not decoded. ``samples`` is a read-only
    float32 array in gate order.
    """
    block_type: str
    data_name: str
    reserved: bytes
    gate_count: int
    range: np.float32
    range_sample_interval: np.float32
    tover: np.float32
    snr_threshold: np.float32
    control_flags: int
    word_size: int
    scale: np.float32
    offset: np.float32
    samples: np.ndarray
    missing_count: int
    stop_reason: StopReason = StopReason.GATE_COUNT_EXHAUSTED

    @classmethod
    def from_header(cls, header: MomentHeader, samples: np.ndarray,
                    stop_reason: StopReason = StopReason.GATE_COUNT_EXHAUSTED) -> 'MomentDataBlock':
        """
        Assemble a block from a header and its decoded samples.

        Args:
            header: Decoded moment header
            samples: Rescaled samples, at most header.gate_count long
            stop_reason: How the sample scan ended

        Returns:
            MomentDataBlock with missing_count filled in
        """
        samples = np.array(samples, dtype=np.float32)
        samples.setflags(write=False)
        values = {f.name: getattr(header, f.name) for f in fields(MomentHeader)}
        return cls(
            **values,
            samples=samples,
            missing_count=count_missing_gates(header.gate_count, len(samples)),
            stop_reason=stop_reason,
        )

    @property
    def header(self) -> MomentHeader:
        """Get the header fields as a MomentHeader."""
        return MomentHeader(**{name: getattr(self, name) for name in MOMENT_HEADER_FIELDS})

    @property
    def moment_name(self) -> str:
        """Get the moment name without padding (e.g. 'SW' for 'SW ')."""
        return self.data_name.strip()

    @property
    def decoded_gates(self) -> int:
        return len(self.samples)

    def gate_ranges(self) -> np.ndarray:
        """
        Get the range of each decoded gate center.

        Returns:
            Gate ranges in km
        """
        gates = np.arange(self.decoded_gates, dtype=np.float64)
        return self.range + gates * self.range_sample_interval

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the block to a plain dictionary.

        Returns:
            Dictionary of header fields, samples as a list, missing_count
            and stop_reason as its string value
        """
        result = {name: getattr(self, name) for name in MOMENT_HEADER_FIELDS}
        result['samples'] = self.samples.tolist()
        result['missing_count'] = self.missing_count
        result['stop_reason'] = self.stop_reason.value
        return result

    def print_header(self) -> None:
        """Print the header information."""
        print(f'Moment Data Block ({self.block_type}{self.data_name}):')
        for name in MOMENT_HEADER_FIELDS:
            print(f'  {name}: {getattr(self, name)}')
        print(f'  decoded_gates: {self.decoded_gates}')
        print(f'  missing_count: {self.missing_count}')
        print(f'  stop_reason: {self.stop_reason.value}')


def read_moment_header(reader: ByteReader) -> MomentHeader:
    """
    Read the fixed moment data header.

    Consumes exactly 28 bytes and applies the fixed-point scale factors.
    No validation is performed.

    Args:
        reader: Cursor positioned at the start of a moment data block

    Returns:
        Decoded MomentHeader

    Raises:
        ReadExhaustedError: If the buffer ends inside the header
    """
    values: Dict[str, Any] = {}
    for name, fmt in MOMENT_HEADER:
        values[name] = reader.unpack(fmt)[0]

    values['block_type'] = values['block_type'].decode('ascii', errors='replace')
    values['data_name'] = values['data_name'].decode('ascii', errors='replace')
    for name, factor in SCALE_FACTORS.items():
        values[name] = np.float32(values[name]) / np.float32(factor)
    values['scale'] = np.float32(values['scale'])
    values['offset'] = np.float32(values['offset'])

    return MomentHeader(**values)


def _at_sentinel(reader: ByteReader, sentinels: FrozenSet[int]) -> bool:
    # Fewer than 4 bytes left cannot hold another block's tag
    if reader.remaining() < 4:
        return False
    # Block tags are ASCII, compared big-endian whatever the sample byte order
    return reader.peek_uint32(byte_order='>') in sentinels


def rescale_samples(raw: Sequence[int], scale: float, offset: float) -> np.ndarray:
    """
    Convert raw sample words to physical values.

    Args:
        raw: Raw unsigned sample words
        scale: Scale coefficient
        offset: Offset coefficient

    Returns:
        float32 array of (raw - offset) / scale
    """
    words = np.asarray(raw, dtype=np.float32)
    # A zero scale passes validation; let it produce inf/nan
    with np.errstate(divide='ignore', invalid='ignore'):
        return (words - np.float32(offset)) / np.float32(scale)


def decode_samples(reader: ByteReader, gate_count: int, word_size: int,
                   scale: float, offset: float,
                   sentinels: Iterable[int] = DATA_BLOCK_SENTINELS) -> Tuple[np.ndarray, StopReason]:
    """
    Decode up to gate_count sample words from the reader.

    Before each gate the next 4 bytes are peeked; if they hold a known
    block-start tag the scan stops. For 16-bit words the tag may also begin
    one byte in, so the cursor steps forward one byte, peeks again and
    steps back before consuming the word.

    Args:
        reader: Cursor positioned at the first sample word
        gate_count: Maximum number of gates to decode
        word_size: Bits per sample word
        scale: Scale coefficient
        offset: Offset coefficient
        sentinels: uint32 values marking the start of another block

    Returns:
        Tuple of (rescaled samples, stop reason)

    Raises:
        ValueError: If the word size is not 8 or 16 bits wide
        ReadExhaustedError: If the buffer ends inside a sample word
    """
    bytes_per_word = word_size // 8
    if bytes_per_word * 8 not in WORD_SIZES:
        raise ValueError(f'Unsupported word size: {word_size}')

    sentinels = frozenset(sentinels)
    raw: List[int] = []
    stop_reason = StopReason.GATE_COUNT_EXHAUSTED

    for _ in range(gate_count):
        if _at_sentinel(reader, sentinels):
            stop_reason = StopReason.SENTINEL_DETECTED
            break

        if bytes_per_word == 1:
            raw.append(reader.read_uint8())
        else:
            reader.advance(1)
            shifted = _at_sentinel(reader, sentinels)
            reader.retreat(1)
            if shifted:
                stop_reason = StopReason.SENTINEL_DETECTED
                break
            raw.append(reader.read_uint16())

    return rescale_samples(raw, scale, offset), stop_reason


def count_missing_gates(gate_count: int, decoded: int) -> int:
    """
    Count declared gates that were not decoded.

    Args:
        gate_count: Declared gate count
        decoded: Number of decoded samples

    Returns:
        gate_count - decoded

    Raises:
        ValueError: If more samples were decoded than declared
    """
    if decoded > gate_count:
        raise ValueError(f'Decoded {decoded} samples for {gate_count} gates')
    return gate_count - decoded


def read_moment_data(reader: ByteReader,
                     sentinels: Iterable[int] = DATA_BLOCK_SENTINELS) -> MomentDataBlock:
    """
    Decode a complete moment data block.

    Reads and validates the header, then decodes the sample array. A block
    whose samples stop early at another block's tag is returned normally,
    with the undecoded gates counted in missing_count.

    Args:
        reader: Cursor positioned at the start of a moment data block
        sentinels: uint32 values marking the start of another block

    Returns:
        Decoded MomentDataBlock

    Raises:
        ReadExhaustedError: If the buffer ends inside the block
        ValidationError: If a header field is out of range; no sample
            bytes are read in that case
    """
    start = reader.tell()
    header = read_moment_header(reader)

    try:
        validate_moment_header(header)
    except ValidationError as e:
        logger.error(f'Invalid moment header at byte {start}: {e}')
        raise

    samples, stop_reason = decode_samples(
        reader, header.gate_count, header.word_size,
        header.scale, header.offset, sentinels
    )
    block = MomentDataBlock.from_header(header, samples, stop_reason)

    if stop_reason is StopReason.SENTINEL_DETECTED:
        logger.debug(f'{block.moment_name}: next block found after {block.decoded_gates} of '
                     f'{block.gate_count} gates at byte {reader.tell()}')
    logger.debug(f'Decoded {block.moment_name} block at byte {start}: '
                 f'{block.decoded_gates} gates, {block.missing_count} missing')
    return block


class MomentDecoder:
    """
    Configured moment data block decoder.

    Holds the sentinel set and the byte order so that callers decoding
    many blocks do not need to pass them around.
    """

    def __init__(self, sentinels: Optional[Iterable[int]] = None,
                 byte_order: str = BYTE_ORDER, log_level: Optional[int] = None):
        """
        Initialize the decoder.

        Args:
            sentinels: uint32 values marking the start of another block
                (default: the Message 31 data block tags)
            byte_order: struct byte order character (default: '>')
            log_level: Logging level for the package; left unchanged when
                None (default: None)
        """
        if byte_order not in ('>', '<'):
            raise ValueError(f'Invalid byte order: {byte_order}')

        self.sentinels: FrozenSet[int] = frozenset(
            DATA_BLOCK_SENTINELS if sentinels is None else sentinels)
        self.byte_order = byte_order
        self.logger = logging.getLogger(__package__)
        if log_level is not None:
            self.logger.setLevel(log_level)

    def reader(self, data: Union[bytes, bytearray, memoryview], offset: int = 0) -> ByteReader:
        """Create a ByteReader over data using the decoder's byte order."""
        return ByteReader(data, position=offset, byte_order=self.byte_order)

    def decode(self, reader: ByteReader) -> MomentDataBlock:
        """
        Decode one moment data block at the reader's position.

        Args:
            reader: Cursor positioned at the start of a moment data block

        Returns:
            Decoded MomentDataBlock

        Raises:
            ValueError: If the reader uses a different byte order than
                the decoder
        """
        if reader.byte_order != self.byte_order:
            raise ValueError(f'Reader byte order {reader.byte_order!r} does not match '
                             f'decoder byte order {self.byte_order!r}')
        return read_moment_data(reader, self.sentinels)

    def decode_bytes(self, data: Union[bytes, bytearray, memoryview], offset: int = 0) -> MomentDataBlock:
        """
        Decode one moment data block from a buffer.

        Args:
            data: Buffer holding the block
            offset: Byte offset of the block in data (default: 0)

        Returns:
            Decoded MomentDataBlock
        """
        return self.decode(self.reader(data, offset))
