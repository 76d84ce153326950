"""
Value coercion rules shared by classification, statistics and sampling.

Truth table for is_numeric_value():
    bool / numpy.bool_                      -> False
    int / float / Decimal / numpy number    -> True (NaN counts as empty)
    str                                     -> True iff strip() is non-empty
                                               and parses to a finite float
    date / datetime / Timestamp             -> False
    None / anything else                    -> False
"""

import math
import numbers
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import numpy as np
import pandas as pd


def is_empty_value(value: Any) -> bool:
    """True for None, empty string, NaN, pd.NA and NaT (pandas or numpy)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, np.datetime64):
        return bool(np.isnat(value))
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    return False


def is_boolean_value(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def is_date_value(value: Any) -> bool:
    # pd.Timestamp and datetime.datetime both subclass datetime.date
    return isinstance(value, (date, np.datetime64)) and value is not pd.NaT


def _parse_numeric_string(value: str) -> Optional[float]:
    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a value to a number, or None if it is not numeric.

    Integers are returned unchanged so statistics keep integer results.
    """
    if is_boolean_value(value):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (numbers.Real, Decimal)):
        number = float(value)
        if math.isnan(number):
            return None
        return number
    if isinstance(value, str):
        return _parse_numeric_string(value)
    return None


def is_numeric_value(value: Any) -> bool:
    return to_number(value) is not None
