"""Descriptive statistics for numeric columns."""

from typing import Any, List, Optional

from models.schemas import ColumnStats
from services.coercion import to_number


def calculate_stats(values: List[Any]) -> Optional[ColumnStats]:
    """
    Calculate statistics over the numeric-coercible values of a column.

    Non-numeric values are skipped. Returns None when nothing is numeric.

    The median is the upper-middle element for even counts
    (sorted[n // 2]), not the mean of the two middle values.
    """
    numbers = [n for n in (to_number(v) for v in values) if n is not None]
    if not numbers:
        return None

    ordered = sorted(numbers)
    total = sum(numbers)
    minimum = ordered[0]
    maximum = ordered[-1]

    return ColumnStats(
        count=len(numbers),
        min=minimum,
        max=maximum,
        sum=total,
        mean=total / len(numbers),
        median=ordered[len(ordered) // 2],
        range=maximum - minimum,
        has_negatives=any(n < 0 for n in numbers),
        has_decimals=any(n % 1 != 0 for n in numbers),
        is_all_positive=all(n >= 0 for n in numbers),
        is_all_integers=all(n % 1 == 0 for n in numbers),
    )
