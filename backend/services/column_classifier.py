"""
Column Classifier.

Determines the primary value type of a column and flags name/distribution
patterns (time series, categories, percentages, identifiers).

CORE PRINCIPLE: Every value is classified independently with the shared
coercion rule, so CSV-sourced numbers (strings before coercion) still land
in the numeric bucket.
"""

from typing import Any, Dict, Hashable, Iterable, List, Tuple

from models.schemas import ColumnPatterns, TypeAnalysis
from services.coercion import is_boolean_value, is_date_value, is_numeric_value, to_number


# Enumeration order doubles as the tie-break order for the primary type
VALUE_TYPES: Tuple[str, ...] = ("number", "string", "date", "boolean", "object")

HOMOGENEITY_THRESHOLD = 90.0  # Primary type share (%) above which a column is homogeneous
MAX_CATEGORY_VALUES = 20
MAX_CATEGORY_RATIO = 0.5

TIME_KEYWORDS = ("date", "time", "month", "year", "day")
PERCENTAGE_KEYWORDS = ("percent", "%")
ID_KEYWORDS = ("id", "key")


def classify_value(value: Any) -> str:
    """Classify a single non-empty value into one of VALUE_TYPES."""
    if is_numeric_value(value):
        return "number"
    if is_date_value(value):
        return "date"
    if is_boolean_value(value):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "object"


def distinct_key(value: Any) -> Hashable:
    """
    Key used when counting distinct values.

    Numbers compare by value (1, 1.0 and numpy.int64(1) are one value);
    otherwise types never collide, so "10", 10 and True are three distinct
    values.
    """
    if not isinstance(value, str) and is_numeric_value(value):
        return ("number", to_number(value))
    try:
        hash(value)
    except TypeError:
        return (type(value).__name__, repr(value))
    return (type(value).__name__, value)


def count_unique(values: Iterable[Any]) -> int:
    return len({distinct_key(v) for v in values})


def analyze_column_types(values: List[Any]) -> TypeAnalysis:
    """
    Analyze the value types of a column's non-empty values.

    Returns counts and percentages per type, the primary type, and the
    homogeneity/mixed flags. A column without values has primary type
    "object".
    """
    type_counts: Dict[str, int] = {t: 0 for t in VALUE_TYPES}
    for value in values:
        type_counts[classify_value(value)] += 1

    total = len(values)
    if total == 0:
        return TypeAnalysis(
            type_counts=type_counts,
            type_percentages={t: 0.0 for t in VALUE_TYPES},
            primary_type="object",
            is_homogeneous=False,
            is_mixed=False,
        )

    # max() keeps the first of equal counts, i.e. enumeration order
    primary_type = max(VALUE_TYPES, key=lambda t: type_counts[t])
    type_percentages = {t: (count / total) * 100 for t, count in type_counts.items()}

    return TypeAnalysis(
        type_counts=type_counts,
        type_percentages=type_percentages,
        primary_type=primary_type,
        is_homogeneous=type_percentages[primary_type] > HOMOGENEITY_THRESHOLD,
        is_mixed=sum(1 for count in type_counts.values() if count > 0) > 1,
    )


def analyze_patterns(values: List[Any], column_name: str) -> ColumnPatterns:
    """Detect time series, category, percentage and identifier patterns."""
    name_lower = column_name.lower()
    unique_count = count_unique(values)

    is_time_series = any(kw in name_lower for kw in TIME_KEYWORDS)
    is_category = 1 < unique_count <= min(MAX_CATEGORY_VALUES, len(values) * MAX_CATEGORY_RATIO)
    is_percentage = any(kw in name_lower for kw in PERCENTAGE_KEYWORDS)
    is_id = any(kw in name_lower for kw in ID_KEYWORDS) or unique_count == len(values)

    return ColumnPatterns(
        is_time_series_candidate=is_time_series,
        is_category_candidate=is_category,
        is_percentage_candidate=is_percentage,
        is_id_candidate=is_id,
    )
