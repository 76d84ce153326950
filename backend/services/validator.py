"""
Chart Data Validation Facade.

Single entry point that checks a dataset's structure, analyzes its columns,
assesses chart compatibility, ranks chart suggestions and collects data
quality warnings.

CORE PRINCIPLE: Validation always returns a result. Internal failures are
converted into parse errors, never raised to the caller.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from models.schemas import (
    ChartError,
    ChartSuggestion,
    ColumnAnalysis,
    DataWarning,
    DatasetMeta,
    PerformanceInfo,
    ValidationResult,
)
from services.chart_compatibility import assess_chart_compatibility
from services.chart_suggestions import generate_chart_suggestions
from services.coercion import is_empty_value, is_numeric_value
from services.dataset_analyzer import analyze_columns
from services.errors import (
    ErrorLog,
    create_empty_file_error,
    create_no_numeric_data_error,
    create_parse_error,
)
from services.sampler import validate_large_dataset
from services.thresholds import DEFAULT_THRESHOLDS, PerformanceThresholds

logger = logging.getLogger(__name__)


# Warning thresholds
MISSING_MEDIUM_PERCENTAGE = 25.0
MISSING_HIGH_PERCENTAGE = 50.0
SMALL_DATASET_ROWS = 3


MetaLike = Union[DatasetMeta, Mapping[str, Any], None]


def _coerce_meta(meta: MetaLike) -> DatasetMeta:
    if meta is None:
        return DatasetMeta()
    if isinstance(meta, DatasetMeta):
        return meta
    return DatasetMeta(
        filename=str(meta["filename"]) if meta.get("filename") is not None else None,
        columns=list(meta.get("columns") or []),
    )


# === Structural Validation ===

def _row_has_values(row: Any) -> bool:
    if not isinstance(row, Mapping):
        return False
    return any(not is_empty_value(value) for value in row.values())


def validate_basic_structure(data: Any, filename: Optional[str] = None) -> List[ChartError]:
    """
    Check the dataset shape before any analysis runs.

    Returns a list of errors; empty means the structure is usable.
    """
    if data is None or not isinstance(data, (list, tuple)):
        return [create_empty_file_error("No data provided for validation", filename)]

    if len(data) == 0:
        return [create_empty_file_error(f'No data rows found in "{filename or "file"}"', filename)]

    first_row = data[0]
    if not isinstance(first_row, Mapping) or len(first_row) == 0:
        return [create_parse_error(
            "Data structure is invalid - no columns detected",
            filename,
            action="check-file-format",
        )]

    if not any(_row_has_values(row) for row in data):
        return [create_empty_file_error(
            f'No valid data rows found in "{filename or "file"}". '
            "All rows appear to be empty or contain only empty values.",
            filename,
        )]

    return []


# === Warnings ===

def generate_warnings(column_analysis: Dict[str, ColumnAnalysis], row_count: int) -> List[DataWarning]:
    """Non-blocking data quality warnings."""
    warnings: List[DataWarning] = []

    for col in column_analysis.values():
        if col.empty_percentage > MISSING_MEDIUM_PERCENTAGE:
            warnings.append(DataWarning(
                type="missing-data",
                message=f'Column "{col.name}" has {col.empty_percentage:.1f}% missing values',
                severity="high" if col.empty_percentage > MISSING_HIGH_PERCENTAGE else "medium",
                column=col.name,
            ))

    for col in column_analysis.values():
        if col.type_analysis.is_mixed and not col.type_analysis.is_homogeneous:
            warnings.append(DataWarning(
                type="mixed-types",
                message=f'Column "{col.name}" contains mixed data types',
                severity="medium",
                column=col.name,
            ))

    if row_count < SMALL_DATASET_ROWS:
        warnings.append(DataWarning(
            type="small-dataset",
            message="Dataset is very small - charts may not be meaningful",
            severity="low",
        ))

    return warnings


def _performance_warning(info: PerformanceInfo) -> DataWarning:
    if info.requires_optimization:
        message = f"Large dataset ({info.original_size} rows) - using optimized rendering for performance"
    else:
        message = f"Medium dataset ({info.original_size} rows) - performance optimizations enabled"
    return DataWarning(
        type="performance",
        message=message,
        severity="high" if info.requires_optimization else "medium",
        suggestion="Charts will automatically optimize for performance",
    )


def _failed_result(errors: List[ChartError], performance: Optional[PerformanceInfo] = None) -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        errors=errors,
        suggestions=[],
        column_analysis={},
        chart_compatibility=None,
        performance=performance or PerformanceInfo(),
    )


def _record(result: ValidationResult, error_log: Optional[ErrorLog]) -> ValidationResult:
    if error_log is not None:
        for error in result.errors:
            error_log.add_error(error)
        for warning in result.warnings:
            error_log.add_warning(warning)
    return result


# === Public API ===

def validate_data_for_charting(
    data: Any,
    meta: MetaLike = None,
    thresholds: Optional[PerformanceThresholds] = None,
    error_log: Optional[ErrorLog] = None,
) -> ValidationResult:
    """
    Validate parsed rows for charting and suggest chart types.

    Args:
        data: List of row mappings (column name -> scalar)
        meta: Parser metadata (filename, columns)
        thresholds: Size thresholds (environment defaults when omitted)
        error_log: Optional collector that receives errors and warnings

    Returns:
        ValidationResult. is_valid is True iff at least one numeric column exists.
    """
    meta = _coerce_meta(meta)
    thresholds = thresholds or DEFAULT_THRESHOLDS
    filename = meta.filename

    structure_errors = validate_basic_structure(data, filename)
    if structure_errors:
        logger.warning(f"Structural validation failed for {filename or 'dataset'}: {structure_errors[0].message}")
        return _record(_failed_result(structure_errors), error_log)

    try:
        performance, analysis_data = validate_large_dataset(data, thresholds=thresholds)

        column_analysis = analyze_columns(analysis_data, meta.columns)
        compatibility = assess_chart_compatibility(column_analysis, len(analysis_data))
        suggestions = generate_chart_suggestions(column_analysis, compatibility)

        warnings = generate_warnings(column_analysis, len(analysis_data))
        if performance.is_large_dataset:
            warnings.append(_performance_warning(performance))

        errors = [] if compatibility.has_numeric_data else [create_no_numeric_data_error(filename)]

        result = ValidationResult(
            is_valid=compatibility.has_numeric_data,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            column_analysis=column_analysis,
            chart_compatibility=compatibility,
            performance=performance,
        )
    except Exception as e:
        logger.exception(f"Data validation failed for {filename or 'dataset'}")
        result = _failed_result([create_parse_error(f"Data validation failed: {e}", filename)])
        return _record(result, error_log)

    logger.info(
        f"Validated {len(data)} rows ({len(column_analysis)} columns): "
        f"valid={result.is_valid}, suggestions={len(suggestions)}, warnings={len(warnings)}"
    )
    return _record(result, error_log)


def has_numeric_data(data: Any) -> bool:
    """Quick pre-check: does the first row hold any numeric value?"""
    if not data or not isinstance(data, (list, tuple)):
        return False

    first_row = data[0]
    if not isinstance(first_row, Mapping):
        return False

    return any(is_numeric_value(value) for value in first_row.values())


def get_chart_recommendations(data: Any, meta: MetaLike = None) -> List[ChartSuggestion]:
    """Ranked chart suggestions for a dataset (empty when structurally invalid)."""
    return validate_data_for_charting(data, meta).suggestions
