"""
Tabular views of decoded moment data blocks.
"""

from typing import Iterable

import pandas as pd

from .constants import MOMENT_HEADER_FIELDS
from .moment import MomentDataBlock


def headers_to_dataframe(blocks: Iterable[MomentDataBlock]) -> pd.DataFrame:
    """
    Build a header table with one row per block.

    Args:
        blocks: Decoded moment data blocks

    Returns:
        DataFrame with the header fields plus decoded_gates, missing_count
        and stop_reason columns
    """
    columns = MOMENT_HEADER_FIELDS + ['decoded_gates', 'missing_count', 'stop_reason']
    rows = []
    for block in blocks:
        row = {name: getattr(block, name) for name in MOMENT_HEADER_FIELDS}
        row['decoded_gates'] = block.decoded_gates
        row['missing_count'] = block.missing_count
        row['stop_reason'] = block.stop_reason.value
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def samples_to_dataframe(block: MomentDataBlock) -> pd.DataFrame:
    """
    Build a per-gate table for one block.

    Args:
        block: Decoded moment data block

    Returns:
        DataFrame with gate, range_km and a column named after the moment
    """
    return pd.DataFrame({
        'gate': pd.Series(range(block.decoded_gates), dtype='int64'),
        'range_km': block.gate_ranges(),
        block.moment_name or 'value': block.samples,
    })
