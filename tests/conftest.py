"""Pytest configuration and shared fixtures for chart analysis tests."""

from datetime import datetime, timedelta

import pytest


@pytest.fixture
def monthly_sales():
    """Three months of sales with a categorical month column."""
    return [
        {"Month": "Jan", "Sales": 1200, "Expenses": 800},
        {"Month": "Feb", "Sales": 1500, "Expenses": 900},
        {"Month": "Mar", "Sales": 1800, "Expenses": 950},
    ]


@pytest.fixture
def people():
    """No numeric columns at all."""
    return [
        {"name": "John", "city": "NYC"},
        {"name": "Jane", "city": "LA"},
    ]


@pytest.fixture
def dated_series():
    """Six daily readings with real date values."""
    start = datetime(2024, 1, 1)
    return [
        {"timestamp": start + timedelta(days=i), "value": 10 + i * 3}
        for i in range(6)
    ]


@pytest.fixture
def csv_strings():
    """Rows as a CSV parser delivers them before coercion."""
    return [
        {"region": "North", "revenue": "100.5", "units": "3"},
        {"region": "South", "revenue": "200", "units": "4"},
        {"region": "North", "revenue": "150.25", "units": "5"},
        {"region": "East", "revenue": "", "units": "6"},
    ]


def make_rows(count, spike_every=None):
    """Rows with a steadily increasing value; optional spikes create outliers."""
    rows = []
    for i in range(count):
        value = i % 100
        if spike_every and i % spike_every == 0 and i > 0:
            value = 100000
        rows.append({"idx": i, "label": f"item-{i % 7}", "value": value})
    return rows


@pytest.fixture
def row_factory():
    return make_rows
