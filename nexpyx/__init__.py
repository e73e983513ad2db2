"""
NexPyX Moment Module

Decoding of NEXRAD Level-II Generic Data Moment blocks.

This module provides classes and functions for:
- Reading big-endian message buffers with a peekable byte cursor
- Decoding and range-checking the 28-byte moment header
- Decoding gate samples, stopping at the start of the next data block
- Tabulating decoded blocks with pandas
"""

from .constants import (
    BYTE_ORDER, MOMENT_HEADER_SIZE, MOMENT_RANGE_LIMITS, SCALE_FACTORS,
    DATA_BLOCK_NAMES, DATA_BLOCK_SENTINELS, sentinels_from_names
)
from .bytereader import ByteReader, ReadExhaustedError
from .validation import (
    RangeCheck, ValidationError, validate_ranges, moment_range_checks,
    validate_moment_header
)
from .moment import (
    MomentHeader, MomentDataBlock, MomentDecoder, StopReason,
    read_moment_header, decode_samples, rescale_samples,
    count_missing_gates, read_moment_data
)
from .tables import headers_to_dataframe, samples_to_dataframe

__version__ = "0.1.0"
__author__ = "NexPyX Team"

__all__ = [
    # Core classes
    'ByteReader',
    'MomentHeader',
    'MomentDataBlock',
    'MomentDecoder',
    'StopReason',
    'RangeCheck',

    # Errors
    'ReadExhaustedError',
    'ValidationError',

    # Decoding functions
    'read_moment_header',
    'decode_samples',
    'rescale_samples',
    'count_missing_gates',
    'read_moment_data',

    # Validation functions
    'validate_ranges',
    'moment_range_checks',
    'validate_moment_header',

    # Tables
    'headers_to_dataframe',
    'samples_to_dataframe',

    # Constants
    'BYTE_ORDER',
    'MOMENT_HEADER_SIZE',
    'MOMENT_RANGE_LIMITS',
    'SCALE_FACTORS',
    'DATA_BLOCK_NAMES',
    'DATA_BLOCK_SENTINELS',
    'sentinels_from_names',
]
