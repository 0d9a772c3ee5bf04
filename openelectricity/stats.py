from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, Optional

import numpy as np

from . import canon, exceptions
from .types import Aggregation, DescribeResult


def is_number(value: object) -> bool:
    """Numeric scalar, excluding bools (NaN counts as a number here)."""
    return isinstance(value, Real) and not isinstance(value, bool)


def is_null(value: object) -> bool:
    """None or a float NaN."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def valid_numbers(values: Iterable[object]) -> np.ndarray:
    """Float array of the non-null, non-NaN numeric entries of values."""
    arr = np.fromiter(
        (float(v) for v in values if is_number(v)), dtype=float  # type: ignore[arg-type]
    )
    return arr[~np.isnan(arr)]


def aggregate(values: Iterable[object], how: Aggregation) -> Optional[float]:
    """
    Sum or mean over the valid numbers in values.

    Returns None when nothing is left to aggregate, never 0 or NaN.
    """
    exceptions.require(
        how in canon.AGGREGATIONS,
        f"aggregation must be one of: {', '.join(canon.AGGREGATIONS)}",
        exceptions.TableError,
    )
    arr = valid_numbers(values)
    if arr.size == 0:
        return None
    if how == "sum":
        return float(arr.sum())
    return float(arr.sum() / arr.size)


def nearest_rank(sorted_values: np.ndarray, q: float) -> float:
    """Value at index floor(count * q) of an ascending array (no interpolation)."""
    n = len(sorted_values)
    idx = min(int(math.floor(n * q)), n - 1)
    return float(sorted_values[idx])


def describe_values(values: Iterable[object]) -> Optional[DescribeResult]:
    """
    Summary statistics over the valid numbers in values.

      - std is the population deviation (divide by count)
      - q25/median/q75 are nearest-rank, zero-indexed floor(count * q)

    Returns None when there are no valid numbers.
    """
    arr = np.sort(valid_numbers(values))
    count = int(arr.size)
    if count == 0:
        return None

    mean = float(arr.sum() / count)
    std = float(np.sqrt(np.sum((arr - mean) ** 2) / count))
    quant = {k: nearest_rank(arr, q) for k, q in canon.QUANTILES.items()}

    return {
        "count": count,
        "mean": mean,
        "std": std,
        "min": float(arr[0]),
        "q25": quant["q25"],
        "median": quant["median"],
        "q75": quant["q75"],
        "max": float(arr[-1]),
    }
