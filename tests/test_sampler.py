"""Tests for deterministic data reduction."""

import pytest

from services.sampler import (
    find_outlier_indices,
    get_numeric_columns,
    intelligent_indices,
    optimize_data_for_charting,
    uniform_indices,
    validate_large_dataset,
)
from services.thresholds import PerformanceThresholds


def test_small_dataset_untouched(monthly_sales):
    result = optimize_data_for_charting(monthly_sales, max_points=10)

    assert result.sampling_method == "none"
    assert result.is_optimized is False
    assert result.data == monthly_sales
    assert result.reduction_ratio == 0
    assert result.performance.disable_animations is False


def test_sampling_disabled(row_factory):
    rows = row_factory(3000)
    result = optimize_data_for_charting(rows, max_points=100, enable_sampling=False)

    assert result.sampling_method == "none"
    assert result.optimized_size == 3000
    assert result.performance.disable_animations is True
    assert result.performance.use_downsampling is True


def test_uniform_sampling_for_moderate_sizes(row_factory):
    rows = row_factory(3000)
    result = optimize_data_for_charting(rows, max_points=1000)

    assert result.sampling_method == "uniform"
    assert result.optimized_size == 1000
    assert [r["idx"] for r in result.data[:3]] == [0, 3, 6]
    assert result.reduction_ratio == pytest.approx(2000 / 3000)


def test_intelligent_sampling_keeps_endpoints_and_order(row_factory):
    rows = row_factory(10000)
    result = optimize_data_for_charting(rows, max_points=2000, enable_sampling=True)

    assert result.sampling_method == "intelligent"
    assert result.optimized_size == 2000
    indices = [r["idx"] for r in result.data]
    assert indices[0] == 0
    assert indices[-1] == 9999
    assert indices == sorted(indices)
    assert len(set(indices)) == 2000


def test_intelligent_sampling_includes_outliers(row_factory):
    # outliers are taken from the first numeric column
    rows = [{"value": r["value"], "idx": r["idx"]} for r in row_factory(6000, spike_every=1499)]
    indices = intelligent_indices(rows, 50)

    assert len(indices) == 50
    outliers = find_outlier_indices(rows, "value", 10)
    assert outliers == [1499, 2998, 4497, 5996]
    assert outliers[0] in indices


def test_intelligent_without_pattern_preservation_is_uniform(row_factory):
    rows = row_factory(6000)

    assert intelligent_indices(rows, 100, preserve_pattern=False) == uniform_indices(6000, 100)


def test_duplicate_rows_are_kept_by_index():
    rows = [{"v": 1} for _ in range(6000)]
    result = optimize_data_for_charting(rows, max_points=500)

    assert result.optimized_size == 500


def test_single_point_budget(row_factory):
    result = optimize_data_for_charting(row_factory(6000), max_points=1)

    assert result.optimized_size == 1
    assert result.data[0]["idx"] == 0


@pytest.mark.parametrize("size,max_points", [(1, 1), (10, 3), (4999, 2000), (5001, 2), (7000, 5000)])
def test_sampling_bound(row_factory, size, max_points):
    result = optimize_data_for_charting(row_factory(size), max_points=max_points)

    assert result.optimized_size <= max(size, max_points)
    if size > max_points:
        assert result.optimized_size == max_points
    assert result.optimized_size <= result.original_size


def test_sampling_is_deterministic(row_factory):
    rows = row_factory(8000, spike_every=333)

    first = optimize_data_for_charting(rows, max_points=700)
    second = optimize_data_for_charting(rows, max_points=700)

    assert first.model_dump() == second.model_dump()


def test_empty_and_invalid_input():
    for data in ([], None, "rows"):
        result = optimize_data_for_charting(data)
        assert result.data == []
        assert result.sampling_method == "none"
        assert result.original_size == 0


def test_max_points_must_be_positive(monthly_sales):
    with pytest.raises(ValueError):
        optimize_data_for_charting(monthly_sales, max_points=0)


def test_custom_thresholds(row_factory):
    thresholds = PerformanceThresholds(sampling_threshold=100, animation_threshold=10)
    result = optimize_data_for_charting(row_factory(150), max_points=20, thresholds=thresholds)

    assert result.sampling_method == "intelligent"
    assert result.performance.disable_animations is True


def test_numeric_columns_detection():
    rows = [{"a": "x", "b": "1", "c": None}, {"a": "y", "b": 2, "c": True}]

    assert get_numeric_columns(rows) == ["b"]


def test_validate_large_dataset(row_factory):
    info, sample = validate_large_dataset(row_factory(6000))

    assert info.is_large_dataset is True
    assert info.requires_optimization is True
    assert info.sample_size == 1000
    assert info.original_size == 6000
    assert len(sample) == 1000

    info, sample = validate_large_dataset(row_factory(1500))
    assert info.is_large_dataset is True
    assert info.requires_optimization is False
    assert len(sample) == 1500
