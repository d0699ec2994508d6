"""
Shared statistical helpers for the sales reports
Order statistics (NTILE buckets, PERCENT_RANK, PERCENTILE_CONT),
null-safe ratios and weighted composite scores.

Undefined measures are carried as NaN: they never raise, and they are
left out of every ranking population.
"""

import math
from typing import Dict, Mapping, Optional, Union

import numpy as np
import pandas as pd

Number = Union[int, float]

WEIGHT_TOLERANCE = 1e-9


def _as_float_array(values) -> np.ndarray:
    """Convert any sequence / Series to a float array with NaN for missing values"""
    series = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=object)
    numeric = pd.to_numeric(series, errors='coerce')
    return numeric.to_numpy(dtype=float, na_value=np.nan)


def _index_of(values) -> pd.Index:
    if isinstance(values, pd.Series):
        return values.index
    return pd.RangeIndex(len(values))


# ============================================
# NULL-SAFE ARITHMETIC
# ============================================

def safe_divide(numerator, denominator):
    """
    Divide like SQL's ``x / NULLIF(y, 0)``

    Args:
        numerator: scalar or Series
        denominator: scalar or Series

    Returns:
        Same shape as the inputs; NaN wherever the denominator is zero or missing
    """
    if denominator is None or np.isscalar(denominator):
        if denominator is None or pd.isna(denominator) or denominator == 0:
            if isinstance(numerator, pd.Series):
                return pd.Series(np.nan, index=numerator.index, dtype=float)
            return float('nan')
        if numerator is None:
            return float('nan')
        return numerator / denominator

    denominator = pd.to_numeric(denominator, errors='coerce').astype(float)
    return numerator / denominator.where(denominator != 0)


def months_between(start, end) -> pd.Series:
    """
    Count calendar month boundaries crossed between two dates
    (same convention as ``DATEDIFF(month, start, end)``)
    """
    start = pd.to_datetime(pd.Series(start) if not isinstance(start, pd.Series) else start)
    end = pd.Timestamp(end)
    return (end.year - start.dt.year) * 12 + (end.month - start.dt.month)


# ============================================
# ORDER STATISTICS
# ============================================

def quantile_buckets(values, k: int) -> pd.Series:
    """
    Assign NTILE(k) bucket indices

    Defined values are sorted (stable, so ties keep input order) and cut
    into k contiguous groups by position. The first ``n % k`` buckets take
    one extra row. Missing values stay unbucketed.

    Args:
        values: Series or sequence of numbers
        k: Number of buckets (3 for tertiles, 4 for quartiles)

    Returns:
        pd.Series: nullable Int64 bucket index in 1..k, aligned with ``values``
    """
    if k < 1:
        raise ValueError(f"Bucket count must be at least 1, got {k}")

    arr = _as_float_array(values)
    index = _index_of(values)
    defined = np.flatnonzero(~np.isnan(arr))
    n = len(defined)

    buckets = np.full(len(arr), np.nan)
    if n:
        order = defined[np.argsort(arr[defined], kind='stable')]

        size, remainder = divmod(n, k)
        large = remainder * (size + 1)
        positions = np.arange(n)
        assigned = np.where(
            positions < large,
            positions // (size + 1),
            remainder + (positions - large) // max(size, 1)
        ) + 1
        buckets[order] = assigned

    return pd.Series(buckets, index=index).astype('Int64')


def percent_rank(values) -> pd.Series:
    """
    PERCENT_RANK over the defined values: (rows strictly smaller) / (n - 1)

    Tied values share the rank of their first occurrence. A population of one
    row ranks 0.0. Missing values stay NaN.
    """
    arr = _as_float_array(values)
    index = _index_of(values)
    mask = ~np.isnan(arr)
    n = int(mask.sum())

    ranks = np.full(len(arr), np.nan)
    if n == 1:
        ranks[mask] = 0.0
    elif n > 1:
        defined = arr[mask]
        smaller = np.searchsorted(np.sort(defined), defined, side='left')
        ranks[mask] = smaller / (n - 1)

    return pd.Series(ranks, index=index)


def percentile_cont(values, q: float) -> float:
    """Continuous (linearly interpolated) percentile, NaN for an empty population"""
    if not 0 <= q <= 1:
        raise ValueError(f"Percentile must be within [0, 1], got {q}")
    defined = pd.Series(_as_float_array(values)).dropna()
    if defined.empty:
        return float('nan')
    return float(defined.quantile(q, interpolation='linear'))


# ============================================
# COMPOSITE SCORES
# ============================================

def validate_weights(weights: Mapping[str, Number]) -> Dict[str, float]:
    """Reject weight vectors that are negative or do not sum to 1.0"""
    if not weights:
        raise ValueError("Weight vector is empty")
    negative = [name for name, w in weights.items() if w < 0]
    if negative:
        raise ValueError(f"Weights must be non-negative: {', '.join(negative)}")
    total = math.fsum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(f"Weights must sum to 1.0, got {total}")
    return {name: float(w) for name, w in weights.items()}


def weighted_composite(scores, weights: Mapping[str, Number]):
    """
    Combine per-dimension scores (0-100 scale) into one weighted score

    Args:
        scores: DataFrame holding one column per weight key, or a single
            mapping of dimension -> score
        weights: dimension -> weight, non-negative and summing to 1.0

    Returns:
        pd.Series (or float / None for a single mapping) rounded to 2 decimals.
        A missing dimension makes the score undefined.
    """
    weights = validate_weights(weights)

    if isinstance(scores, pd.DataFrame):
        missing = [name for name in weights if name not in scores.columns]
        if missing:
            raise KeyError(f"Missing score columns: {', '.join(missing)}")
        total = pd.Series(0.0, index=scores.index)
        for name, weight in weights.items():
            total = total + pd.to_numeric(scores[name], errors='coerce').astype(float) * weight
        return total.round(2)

    values = []
    for name, weight in weights.items():
        value: Optional[Number] = scores.get(name)
        if value is None or pd.isna(value):
            return None
        values.append(value * weight)
    return round(math.fsum(values), 2)
