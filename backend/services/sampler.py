"""
Data Reduction / Sampler.

Deterministically reduces large datasets to a bounded number of rows before
rendering. Two strategies:
- uniform: fixed stride by index
- intelligent: endpoints + uniform interior + IQR outliers, in original order

CORE PRINCIPLE: Same input and thresholds, same output. No randomness.
Rows are selected by original index, never by value equality.
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from models.schemas import PerformanceHints, PerformanceInfo, SamplingResult
from services.coercion import is_numeric_value, to_number
from services.thresholds import DEFAULT_THRESHOLDS, PerformanceThresholds

logger = logging.getLogger(__name__)


IQR_MULTIPLIER = 1.5


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# === Index Selection ===

def uniform_indices(size: int, target_size: int) -> List[int]:
    """Indices at stride size / target_size."""
    if size <= target_size:
        return list(range(size))
    step = size / target_size
    return [math.floor(i * step) for i in range(target_size)]


def uniform_sample(data: Sequence[Mapping[str, Any]], target_size: int) -> List[Mapping[str, Any]]:
    """Simple uniform sampling - takes every nth row."""
    return [data[i] for i in uniform_indices(len(data), target_size)]


def get_numeric_columns(data: Sequence[Mapping[str, Any]]) -> List[str]:
    """Columns of the first row with at least one numeric value anywhere."""
    if not data:
        return []
    return [
        column for column in data[0].keys()
        if any(is_numeric_value(row.get(column)) for row in data)
    ]


def find_outlier_indices(
    data: Sequence[Mapping[str, Any]],
    column: str,
    max_outliers: int = 10,
) -> List[int]:
    """
    Indices of rows whose value in column lies outside
    [Q1 - 1.5 IQR, Q3 + 1.5 IQR].

    Quartiles are taken as sorted[floor(n * 0.25)] and sorted[floor(n * 0.75)].
    """
    if max_outliers <= 0:
        return []

    numbers = [(i, to_number(row.get(column))) for i, row in enumerate(data)]
    numbers = [(i, n) for i, n in numbers if n is not None]
    if not numbers:
        return []

    ordered = np.sort(np.array([n for _, n in numbers], dtype=float))
    q1 = ordered[int(len(ordered) * 0.25)]
    q3 = ordered[int(len(ordered) * 0.75)]
    iqr = q3 - q1
    lower_bound = q1 - IQR_MULTIPLIER * iqr
    upper_bound = q3 + IQR_MULTIPLIER * iqr

    outliers = [i for i, n in numbers if n < lower_bound or n > upper_bound]
    return outliers[:max_outliers]


def intelligent_indices(
    data: Sequence[Mapping[str, Any]],
    target_size: int,
    preserve_pattern: bool = True,
) -> List[int]:
    """
    Pattern-preserving selection: first and last rows, uniformly strided
    interior rows, then outliers of the first numeric column. Any slots still
    free are filled from the uniform stride grid. Result is sorted by index
    and truncated to target_size.
    """
    size = len(data)
    if size <= target_size:
        return list(range(size))

    if not preserve_pattern:
        return uniform_indices(size, target_size)

    selected = {0}
    if size > 1:
        selected.add(size - 1)

    middle_points_needed = max(0, target_size - 2)
    if middle_points_needed > 0 and size > 2:
        step = (size - 2) / middle_points_needed
        i = 1
        while i < middle_points_needed and i * step + 1 < size - 1:
            index = _round_half_up(i * step + 1)
            if index < size - 1:
                selected.add(index)
            i += 1

    numeric_columns = get_numeric_columns(data)
    if numeric_columns and len(selected) < target_size:
        remaining = target_size - len(selected)
        for index in find_outlier_indices(data, numeric_columns[0], remaining):
            selected.add(index)

    if len(selected) < target_size:
        for index in uniform_indices(size, target_size):
            if len(selected) >= target_size:
                break
            selected.add(index)

    return sorted(selected)[:target_size]


def intelligent_sample(
    data: Sequence[Mapping[str, Any]],
    target_size: int,
    preserve_pattern: bool = True,
) -> List[Mapping[str, Any]]:
    return [data[i] for i in intelligent_indices(data, target_size, preserve_pattern)]


# === Public API ===

def optimize_data_for_charting(
    data: Any,
    max_points: Optional[int] = None,
    preserve_pattern: bool = True,
    enable_sampling: bool = True,
    thresholds: Optional[PerformanceThresholds] = None,
) -> SamplingResult:
    """
    Reduce a dataset for chart rendering.

    Args:
        data: Sequence of row mappings
        max_points: Maximum rows to keep (defaults to thresholds.max_chart_points)
        preserve_pattern: Keep endpoints and outliers when heavily sampling
        enable_sampling: When False the data is returned unchanged
        thresholds: Size thresholds (environment defaults when omitted)

    Returns:
        SamplingResult with the (possibly reduced) rows and render hints
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    if max_points is None:
        max_points = thresholds.max_chart_points
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")

    if not isinstance(data, (list, tuple)) or len(data) == 0:
        return SamplingResult(
            data=[],
            is_optimized=False,
            original_size=0,
            optimized_size=0,
            sampling_method="none",
        )

    original_size = len(data)
    optimized_data = list(data)
    sampling_method = "none"

    performance = PerformanceHints(
        disable_animations=original_size > thresholds.animation_threshold,
        use_downsampling=original_size > thresholds.large_dataset,
        chunk_processing=original_size > thresholds.chunk_size,
    )

    if enable_sampling and original_size > max_points:
        if original_size > thresholds.sampling_threshold:
            optimized_data = intelligent_sample(data, max_points, preserve_pattern)
            sampling_method = "intelligent"
        else:
            optimized_data = uniform_sample(data, max_points)
            sampling_method = "uniform"
        logger.info(
            f"Sampled {original_size} rows down to {len(optimized_data)} ({sampling_method})"
        )

    optimized_size = len(optimized_data)
    return SamplingResult(
        data=optimized_data,
        is_optimized=optimized_size != original_size,
        original_size=original_size,
        optimized_size=optimized_size,
        sampling_method=sampling_method,
        performance=performance,
        reduction_ratio=(original_size - optimized_size) / original_size,
    )


def validate_large_dataset(
    data: Sequence[Mapping[str, Any]],
    sample_size: Optional[int] = None,
    thresholds: Optional[PerformanceThresholds] = None,
) -> Tuple[PerformanceInfo, List[Mapping[str, Any]]]:
    """
    Decide whether a dataset should be analysed on a sample.

    Returns the PerformanceInfo and the rows to analyse.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    if sample_size is None:
        sample_size = thresholds.analysis_sample_size

    requires_optimization = len(data) > thresholds.sampling_threshold
    sample_data = uniform_sample(data, sample_size) if requires_optimization else list(data)

    info = PerformanceInfo(
        is_large_dataset=len(data) > thresholds.large_dataset,
        requires_optimization=requires_optimization,
        sample_size=len(sample_data),
        original_size=len(data),
    )
    return info, sample_data
