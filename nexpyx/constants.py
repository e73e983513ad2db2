"""
Constants and lookup tables for NEXRAD Level-II moment data decoding.

This module contains the field layout, scale factors, validation limits and
block-start sentinels needed to decode a Generic Data Moment block from a
Message Type 31 radial. The values follow:
- "Interface Control Document for the RDA/RPG" (ICD 2620002), Table XVII-E
"""

import struct
from typing import Dict, FrozenSet, List, Tuple

# Byte order of the Level-II archive format
BYTE_ORDER = '>'  # big-endian

# Header size
MOMENT_HEADER_SIZE = 28  # bytes

# Generic Data Moment header layout: (field name, struct format)
MOMENT_HEADER: List[Tuple[str, str]] = [
    ('block_type', '1s'),
    ('data_name', '3s'),
    ('reserved', '4s'),
    ('gate_count', 'H'),
    ('range', 'H'),
    ('range_sample_interval', 'H'),
    ('tover', 'H'),
    ('snr_threshold', 'H'),
    ('control_flags', 'B'),
    ('word_size', 'B'),
    ('scale', 'f'),
    ('offset', 'f'),
]

MOMENT_HEADER_FIELDS: List[str] = [name for name, _ in MOMENT_HEADER]

# Raw uint16 fields stored as fixed-point values
SCALE_FACTORS: Dict[str, float] = {
    'range': 1000.0,                  # km
    'range_sample_interval': 1000.0,  # km
    'tover': 100.0,                   # dB
    'snr_threshold': 1000.0,          # dB
}

# Inclusive (min, max) bounds of the header fields
MOMENT_RANGE_LIMITS: Dict[str, Tuple[float, float]] = {
    'gate_count': (0, 1840),
    'range': (0, 32.768),
    'range_sample_interval': (0.25, 4),
    'tover': (0, 20),
    'snr_threshold': (-12, 20),
    'control_flags': (0, 3),
    'word_size': (8, 16),
    'scale': (0, 65535),
    'offset': (-60.5, 65535),
}

# Supported sample word sizes in bits
WORD_SIZES: Tuple[int, ...] = (8, 16)

# Four-byte tags opening each data block of a Message 31 radial
DATA_BLOCK_NAMES: List[str] = [
    'DREF',  # Reflectivity
    'DVEL',  # Velocity
    'DSW ',  # Spectrum width
    'DZDR',  # Differential reflectivity
    'DPHI',  # Differential phase
    'DRHO',  # Correlation coefficient
    'DCFP',  # Clutter filter power removed
]


def sentinels_from_names(names) -> FrozenSet[int]:
    """
    Build a sentinel set from four-character block tags.

    Args:
        names: Iterable of 4-character ASCII tags

    Returns:
        Frozen set of big-endian uint32 values

    Raises:
        ValueError: If a tag is not exactly four ASCII characters
    """
    values = set()
    for name in names:
        encoded = name.encode('ascii')
        if len(encoded) != 4:
            raise ValueError(f'Block tag must be 4 characters: {name!r}')
        values.add(struct.unpack('>I', encoded)[0])
    return frozenset(values)


# 1146242374, 1146504524, 1146312480, 1146766418, 1146112073, 1146243151, 1145259600
DATA_BLOCK_SENTINELS: FrozenSet[int] = sentinels_from_names(DATA_BLOCK_NAMES)
