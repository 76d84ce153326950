"""
Chart Suggestion Engine.

Scores chart types against the compatibility gates and column analysis.
Ranking is an ordered rule table: each rule has a gate, a confidence, a
reason and a column-role mapper, evaluated in sequence.

CORE PRINCIPLE: Fixed, auditable rules. Confidences are constants, and ties
keep rule order (bar, line, pie, area).
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from models.schemas import ChartCompatibility, ChartSuggestion, ColumnAnalysis
from services.chart_compatibility import categorical_columns, date_columns, numeric_columns


# Pie charts read well only with a handful of slices
MIN_PIE_CATEGORIES = 2
MAX_PIE_CATEGORIES = 8
MIN_AREA_CHART_ROWS = 5

NO_NUMERIC_DATA_SUGGESTION = ChartSuggestion(
    chart_type=None,
    confidence=0,
    reason="No numeric data found for charting",
    requirements="Charts require at least one column with numeric values",
)


@dataclass(frozen=True)
class SuggestionContext:
    """Everything a rule may look at."""
    column_analysis: Dict[str, ColumnAnalysis]
    compatibility: ChartCompatibility

    @property
    def row_count(self) -> int:
        return self.compatibility.row_count


@dataclass(frozen=True)
class SuggestionRule:
    """One row of the suggestion table."""
    chart_type: str
    gate: Callable[[SuggestionContext], bool]
    confidence: Callable[[SuggestionContext], int]
    reason: Callable[[SuggestionContext], str]
    columns: Callable[[SuggestionContext], Dict[str, List[str]]]


# === Column Role Mappers ===

def _names(columns: List[ColumnAnalysis]) -> List[str]:
    return [col.name for col in columns]


def good_category_columns(column_analysis: Dict[str, ColumnAnalysis]) -> List[ColumnAnalysis]:
    """Categorical columns with few enough distinct values for a pie chart."""
    return [
        col for col in categorical_columns(column_analysis)
        if MIN_PIE_CATEGORIES <= col.unique_values <= MAX_PIE_CATEGORIES
    ]


def _bar_columns(ctx: SuggestionContext) -> Dict[str, List[str]]:
    analysis = ctx.column_analysis
    return {
        "xAxis": _names(categorical_columns(analysis) + date_columns(analysis)),
        "yAxis": _names(numeric_columns(analysis)),
    }


def _trend_columns(ctx: SuggestionContext) -> Dict[str, List[str]]:
    analysis = ctx.column_analysis
    dates = date_columns(analysis)
    return {
        "xAxis": _names(dates) if dates else _names(categorical_columns(analysis)),
        "yAxis": _names(numeric_columns(analysis)),
    }


def _pie_columns(ctx: SuggestionContext) -> Dict[str, List[str]]:
    analysis = ctx.column_analysis
    return {
        "categories": _names(good_category_columns(analysis)),
        "values": _names(numeric_columns(analysis)),
    }


# === Rule Table ===

SUGGESTION_RULES: List[SuggestionRule] = [
    SuggestionRule(
        chart_type="bar",
        gate=lambda ctx: ctx.compatibility.is_bar_chart_candidate,
        confidence=lambda ctx: 90 if ctx.compatibility.has_categories else 70,
        reason=lambda ctx: (
            "Categorical data with numeric values - ideal for comparison"
            if ctx.compatibility.has_categories
            else "Numeric data suitable for bar chart visualization"
        ),
        columns=_bar_columns,
    ),
    SuggestionRule(
        chart_type="line",
        gate=lambda ctx: ctx.compatibility.is_line_chart_candidate,
        confidence=lambda ctx: 95 if ctx.compatibility.is_time_series_candidate else 75,
        reason=lambda ctx: (
            "Time series data - perfect for showing trends over time"
            if ctx.compatibility.is_time_series_candidate
            else "Sequential numeric data suitable for trend visualization"
        ),
        columns=_trend_columns,
    ),
    SuggestionRule(
        chart_type="pie",
        gate=lambda ctx: (
            ctx.compatibility.is_pie_chart_candidate
            and len(good_category_columns(ctx.column_analysis)) > 0
        ),
        confidence=lambda ctx: 85,
        reason=lambda ctx: "Categorical data with numeric values - good for showing proportions",
        columns=_pie_columns,
    ),
    SuggestionRule(
        chart_type="area",
        gate=lambda ctx: (
            ctx.compatibility.is_time_series_candidate
            and ctx.row_count >= MIN_AREA_CHART_ROWS
        ),
        confidence=lambda ctx: 80,
        reason=lambda ctx: "Time series data with multiple points - suitable for cumulative visualization",
        columns=_trend_columns,
    ),
]


def generate_chart_suggestions(
    column_analysis: Dict[str, ColumnAnalysis],
    compatibility: ChartCompatibility,
) -> List[ChartSuggestion]:
    """
    Produce chart suggestions sorted by confidence (highest first).

    Without numeric data a single sentinel suggestion with chart_type=None
    is returned.
    """
    if not compatibility.has_numeric_data:
        return [NO_NUMERIC_DATA_SUGGESTION.model_copy()]

    ctx = SuggestionContext(column_analysis=column_analysis, compatibility=compatibility)
    suggestions = [
        ChartSuggestion(
            chart_type=rule.chart_type,
            confidence=rule.confidence(ctx),
            reason=rule.reason(ctx),
            suitable_columns=rule.columns(ctx),
        )
        for rule in SUGGESTION_RULES
        if rule.gate(ctx)
    ]

    # sorted() is stable, so equal confidences keep rule order
    return sorted(suggestions, key=lambda s: -s.confidence)
