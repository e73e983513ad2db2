"""
Range validation for decoded moment headers.

All violations are collected and reported together in a single
ValidationError rather than stopping at the first bad field.
"""

from dataclasses import dataclass
from typing import Iterable, List, TYPE_CHECKING, Union

from .constants import MOMENT_RANGE_LIMITS

if TYPE_CHECKING:
    from .moment import MomentHeader


@dataclass(frozen=True)
class RangeCheck:
    """
    Inclusive bound check for one named header field.

    Attributes:
        name: Field name
        value: Decoded field value
        minimum: Lowest accepted value
        maximum: Highest accepted value
    """
    name: str
    value: Union[int, float]
    minimum: float
    maximum: float

    def contains(self) -> bool:
        """Check whether the value lies within [minimum, maximum]."""
        return self.minimum <= self.value <= self.maximum

    def describe(self) -> str:
        return f'{self.name}={self.value} not in [{self.minimum}, {self.maximum}]'


class ValidationError(ValueError):
    """Raised when one or more header fields are out of range."""

    def __init__(self, failures: List[RangeCheck]):
        self.failures = list(failures)
        details = '; '.join(check.describe() for check in self.failures)
        super().__init__(f'{len(self.failures)} field(s) out of range: {details}')

    @property
    def field_names(self) -> List[str]:
        return [check.name for check in self.failures]


def validate_ranges(checks: Iterable[RangeCheck]) -> None:
    """
    Validate a collection of range checks.

    Args:
        checks: Range checks to evaluate

    Raises:
        ValidationError: Listing every check whose value is out of bounds
    """
    failures = [check for check in checks if not check.contains()]
    if failures:
        raise ValidationError(failures)


def moment_range_checks(header: 'MomentHeader') -> List[RangeCheck]:
    """
    Build the range checks for a moment header.

    Args:
        header: Decoded moment header

    Returns:
        One RangeCheck per bounded field, in wire order
    """
    return [
        RangeCheck(name, getattr(header, name), minimum, maximum)
        for name, (minimum, maximum) in MOMENT_RANGE_LIMITS.items()
    ]


def validate_moment_header(header: 'MomentHeader') -> None:
    """Validate every bounded field of a moment header."""
    validate_ranges(moment_range_checks(header))
