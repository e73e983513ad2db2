"""
Test module for moment header range validation.
"""

from dataclasses import replace

import numpy as np
import pytest

from nexpyx.constants import MOMENT_RANGE_LIMITS
from nexpyx.moment import MomentHeader
from nexpyx.validation import (
    RangeCheck,
    ValidationError,
    moment_range_checks,
    validate_moment_header,
    validate_ranges,
)


@pytest.fixture
def header():
    """A header with every field inside its bounds."""
    return MomentHeader(
        block_type='D', data_name='REF', reserved=b'\x00' * 4,
        gate_count=1832, range=2.125, range_sample_interval=0.25,
        tover=5.0, snr_threshold=2.0, control_flags=0, word_size=8,
        scale=2.0, offset=66.0,
    )


class TestRangeCheck:
    """Test cases for RangeCheck."""

    @pytest.mark.parametrize('value', [0.25, 1.0, 4.0])
    def test_bounds_are_inclusive(self, value):
        assert RangeCheck('range_sample_interval', value, 0.25, 4).contains()

    @pytest.mark.parametrize('value', [0.2, 4.001, float('nan')])
    def test_out_of_bounds(self, value):
        assert not RangeCheck('range_sample_interval', value, 0.25, 4).contains()

    def test_validate_ranges_success_is_silent(self):
        assert validate_ranges([RangeCheck('tover', 1.0, 0, 20)]) is None


class TestMomentHeaderValidation:
    """Test cases for the nine header checks."""

    def test_checks_cover_all_limits(self, header):
        checks = moment_range_checks(header)
        assert [check.name for check in checks] == list(MOMENT_RANGE_LIMITS)
        assert len(checks) == 9

    def test_integer_fields_keep_integer_values(self, header):
        checks = {check.name: check for check in moment_range_checks(header)}
        assert checks['gate_count'].value == 1832
        assert isinstance(checks['gate_count'].value, int)
        assert 'gate_count=1832 ' in checks['gate_count'].describe()

    def test_valid_header(self, header):
        validate_moment_header(header)

    @pytest.mark.parametrize('field, value', [
        ('gate_count', 1841),
        ('range', 32.769),
        ('range_sample_interval', 0.2),
        ('tover', 20.01),
        ('snr_threshold', -12.5),
        ('control_flags', 4),
        ('word_size', 32),
        ('scale', -1.0),
        ('offset', -61.0),
    ])
    def test_single_violation(self, header, field, value):
        with pytest.raises(ValidationError) as excinfo:
            validate_moment_header(replace(header, **{field: value}))

        assert excinfo.value.field_names == [field]
        assert field in str(excinfo.value)

    def test_all_violations_reported(self, header):
        bad = replace(header, gate_count=2000, control_flags=9, word_size=4)

        with pytest.raises(ValidationError) as excinfo:
            validate_moment_header(bad)

        assert excinfo.value.field_names == ['gate_count', 'control_flags', 'word_size']
        assert '3 field(s) out of range' in str(excinfo.value)
        assert 'gate_count=2000 not in' in str(excinfo.value)

    @pytest.mark.parametrize('field, value', [
        ('gate_count', 0),
        ('gate_count', 1840),
        ('range', np.float32(32.767)),
        ('snr_threshold', -12.0),
        ('word_size', 16),
        ('offset', -60.5),
    ])
    def test_boundary_values_accepted(self, header, field, value):
        validate_moment_header(replace(header, **{field: value}))
