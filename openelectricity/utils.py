# openelectricity/utils.py
from __future__ import annotations
from datetime import datetime
from types import MappingProxyType
from typing import Hashable, Iterable, Mapping, Tuple

import numpy as np
import pandas as pd

from . import canon, stats
from .types import Row, Scalar

CellKey = Tuple[Hashable, ...]


def cell_key(value: Scalar) -> CellKey:
    """
    Hashable, type-tagged identity of a cell value.

    None, NaN, 0, False and "0" all map to different keys, so composite
    keys built from these never collide the way joined strings do.
    """
    if value is None or value is pd.NaT or stats.is_null(value):
        return ("null",)
    if isinstance(value, (bool, np.bool_)):
        return ("bool", bool(value))
    if stats.is_number(value):
        return ("num", value)
    if isinstance(value, str):
        return ("str", value)
    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
        return ("ts", ts.value, ts.tzinfo is not None)
    try:
        hash(value)
    except TypeError:
        return ("repr", type(value).__name__, repr(value))
    return (type(value).__name__, value)


def group_key(row: Row, columns: Iterable[str]) -> Tuple[CellKey, ...]:
    """Composite key of row over columns, in the given column order."""
    return tuple(cell_key(row.get(c)) for c in columns)


def columns_key(columns: Mapping[str, Scalar]) -> Tuple[Tuple[str, CellKey], ...]:
    """Order-independent key of a grouping-column mapping (row merge key part)."""
    return tuple(sorted((name, cell_key(v)) for name, v in columns.items()))


def freeze_row(row: Mapping[str, Scalar]) -> Row:
    """Read-only view of a row; already frozen rows are shared as-is."""
    if isinstance(row, MappingProxyType):
        return row
    return MappingProxyType(dict(row))


def interval_of(row: Row) -> pd.Timestamp:
    return row[canon.INTERVAL_COL]  # type: ignore[return-value]
