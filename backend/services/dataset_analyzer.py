"""
Dataset Analyzer.

Runs the column classifier and statistics over every column of a dataset.
Rows are only read, never modified. Rows are looked up by their own keys;
results are keyed by the column name as text.
"""

from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence

from models.schemas import ColumnAnalysis
from services.coercion import is_empty_value
from services.column_classifier import analyze_column_types, analyze_patterns, count_unique
from services.column_stats import calculate_stats


def resolve_columns(
    rows: Sequence[Mapping[Hashable, Any]],
    column_names: Optional[List[Hashable]] = None,
) -> List[Hashable]:
    """Use the explicit column list if given, else the keys of the first row."""
    if column_names:
        return list(column_names)
    if not rows:
        return []
    return list(rows[0].keys())


def analyze_column(rows: Sequence[Mapping[Hashable, Any]], column: Hashable) -> ColumnAnalysis:
    """Analyze a single column; missing keys count as empty values."""
    name = str(column)
    values = [row.get(column) for row in rows]
    values = [v for v in values if not is_empty_value(v)]

    total_values = len(rows)
    non_empty_values = len(values)
    empty_count = total_values - non_empty_values

    type_analysis = analyze_column_types(values)
    stats = calculate_stats(values) if type_analysis.primary_type == "number" else None
    patterns = analyze_patterns(values, name)
    unique_values = count_unique(values)

    return ColumnAnalysis(
        name=name,
        total_values=total_values,
        non_empty_values=non_empty_values,
        empty_count=empty_count,
        empty_percentage=(empty_count / total_values) * 100 if total_values else 0.0,
        type_analysis=type_analysis,
        stats=stats,
        patterns=patterns,
        is_chartable=type_analysis.primary_type in ("number", "date"),
        is_categorical=type_analysis.primary_type == "string" and non_empty_values > 0,
        unique_values=unique_values,
        unique_percentage=(unique_values / non_empty_values) * 100 if non_empty_values else 0.0,
    )


def analyze_columns(
    rows: Sequence[Mapping[Hashable, Any]],
    column_names: Optional[List[Hashable]] = None,
) -> Dict[str, ColumnAnalysis]:
    """Analyze every column, preserving column order."""
    analyses = (analyze_column(rows, column) for column in resolve_columns(rows, column_names))
    return {analysis.name: analysis for analysis in analyses}
