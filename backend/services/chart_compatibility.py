"""
Chart Compatibility Assessor.

Reduces per-column analysis to dataset-level gates. The gates are necessary,
not sufficient: final scoring happens in services.chart_suggestions.
"""

from typing import Dict, List

from models.schemas import ChartCompatibility, ColumnAnalysis


MIN_LINE_CHART_ROWS = 3


# === Column Groups ===

def numeric_columns(column_analysis: Dict[str, ColumnAnalysis]) -> List[ColumnAnalysis]:
    return [
        col for col in column_analysis.values()
        if col.is_chartable and col.type_analysis.primary_type == "number"
    ]


def categorical_columns(column_analysis: Dict[str, ColumnAnalysis]) -> List[ColumnAnalysis]:
    return [col for col in column_analysis.values() if col.is_categorical]


def date_columns(column_analysis: Dict[str, ColumnAnalysis]) -> List[ColumnAnalysis]:
    return [col for col in column_analysis.values() if col.type_analysis.primary_type == "date"]


# === Assessment ===

def assess_chart_compatibility(
    column_analysis: Dict[str, ColumnAnalysis],
    row_count: int,
) -> ChartCompatibility:
    """
    Build dataset-level chart candidacy flags.

    Args:
        column_analysis: Per-column analysis map
        row_count: Number of rows the analysis was computed on
    """
    numeric = numeric_columns(column_analysis)
    categorical = categorical_columns(column_analysis)
    dates = date_columns(column_analysis)

    has_numeric = len(numeric) > 0

    return ChartCompatibility(
        has_numeric_data=has_numeric,
        has_categories=len(categorical) > 0,
        has_dates=len(dates) > 0,
        numeric_column_count=len(numeric),
        categorical_column_count=len(categorical),
        date_column_count=len(dates),
        is_time_series_candidate=len(dates) > 0 and has_numeric,
        is_pie_chart_candidate=len(categorical) > 0 and has_numeric,
        is_bar_chart_candidate=(len(categorical) > 0 or len(dates) > 0) and has_numeric,
        is_line_chart_candidate=row_count >= MIN_LINE_CHART_ROWS and has_numeric,
        total_columns=len(column_analysis),
        usable_columns=sum(
            1 for col in column_analysis.values() if col.is_chartable or col.is_categorical
        ),
        row_count=row_count,
    )
