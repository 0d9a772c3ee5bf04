"""
DataTable: a small pandas/polars-like table over network time series.

Rows are read-only mappings of column name → scalar. Every row carries an
'interval' (tz-aware Timestamp), the grouping columns and one column per
metric. Every operation returns a new DataTable; the receiver and its rows
are never modified.
"""

from __future__ import annotations

import logging
from functools import cached_property, cmp_to_key
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import pandas as pd

from . import canon, exceptions, stats, utils
from .types import Aggregation, DescribeResult, Row, Scalar

logger = logging.getLogger(__name__)

Columns = Union[str, Sequence[str]]


def _as_list(columns: Columns) -> List[str]:
    return [columns] if isinstance(columns, str) else list(columns)


def _compare_values(a: Scalar, b: Scalar) -> int:
    """Three-way compare with nulls lowest; incomparable types order by type name."""
    a_null, b_null = stats.is_null(a), stats.is_null(b)
    if a_null and b_null:
        return 0
    if a_null:
        return -1
    if b_null:
        return 1
    try:
        if a < b:  # type: ignore[operator]
            return -1
        if a > b:  # type: ignore[operator]
            return 1
        return 0
    except TypeError:
        ta, tb = type(a).__name__, type(b).__name__
        return (ta > tb) - (ta < tb)


class DataTable:
    """
    Immutable table of time-series rows.

    Attributes (read-only):
      - rows: list of read-only row mappings, in table order
      - groupings: grouping columns (series groupings, or the last group_by)
      - metrics: metric name → unit
    """

    def __init__(
        self,
        rows: Iterable[Mapping[str, Scalar]],
        groupings: Sequence[str],
        metrics: Mapping[str, str],
    ) -> None:
        self._rows: Tuple[Row, ...] = tuple(utils.freeze_row(r) for r in rows)
        self._groupings: Tuple[str, ...] = tuple(groupings)
        self._metrics: Dict[str, str] = dict(metrics)
        self._value_indexes: Dict[str, Dict[utils.CellKey, List[int]]] = {}

    # ------------------ accessors ------------------

    @property
    def rows(self) -> List[Row]:
        return list(self._rows)

    @property
    def groupings(self) -> List[str]:
        return list(self._groupings)

    @property
    def metrics(self) -> Dict[str, str]:
        return dict(self._metrics)

    @property
    def columns(self) -> List[str]:
        """Column names in row order (schema order for an empty table)."""
        if self._rows:
            return list(self._rows[0].keys())
        return [canon.INTERVAL_COL, *self._groupings, *self._metrics]

    @property
    def empty(self) -> bool:
        return not self._rows

    def unit(self, metric: str) -> str:
        if metric not in self._metrics:
            raise exceptions.TableError(f"Unknown metric '{metric}'.")
        return self._metrics[metric]

    def column(self, name: str) -> List[Scalar]:
        """Values of one column, None where a row lacks it."""
        return [row.get(name) for row in self._rows]

    def unique(self, name: str) -> List[Scalar]:
        """Distinct values of a column in first-seen order."""
        index = self._value_index(name)
        return [self._rows[positions[0]].get(name) for positions in index.values()]

    def lookup(self, interval: object, **keys: Scalar) -> Optional[Row]:
        """
        Row at interval with the given grouping values, or None.

        Grouping columns not passed in keys are matched against None.
        `interval` must be tz-aware (Timestamp, datetime or ISO string).
        """
        ts = pd.Timestamp(interval)  # type: ignore[arg-type]
        exceptions.require(
            ts.tzinfo is not None,
            "lookup interval must be tz-aware.",
            exceptions.TableError,
        )
        key = (ts.value, utils.group_key(keys, self._groupings))
        return self._key_index.get(key)

    def latest_timestamp(self) -> pd.Timestamp:
        """Latest 'interval' in the table; the table must not be empty."""
        if not self._rows:
            raise exceptions.EmptyTableError(
                "latest_timestamp() requires a non-empty table."
            )
        return self._latest

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataTable):
            return NotImplemented
        return (
            self._groupings == other._groupings
            and self._metrics == other._metrics
            and [dict(r) for r in self._rows] == [dict(r) for r in other._rows]
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"DataTable(rows={len(self._rows)}, groupings={list(self._groupings)}, "
            f"metrics={self._metrics})"
        )

    # ------------------ memoised indexes ------------------

    @cached_property
    def _latest(self) -> pd.Timestamp:
        return max(utils.interval_of(r) for r in self._rows)

    @cached_property
    def _key_index(self) -> Dict[tuple, Row]:
        index: Dict[tuple, Row] = {}
        for row in self._rows:
            key = (
                utils.interval_of(row).value,
                utils.group_key(row, self._groupings),
            )
            index.setdefault(key, row)
        return index

    def _value_index(self, name: str) -> Dict[utils.CellKey, List[int]]:
        index = self._value_indexes.get(name)
        if index is None:
            index = {}
            for pos, row in enumerate(self._rows):
                index.setdefault(utils.cell_key(row.get(name)), []).append(pos)
            self._value_indexes[name] = index
        return index

    # ------------------ operations ------------------

    def _derive(
        self,
        rows: Iterable[Row],
        groupings: Optional[Sequence[str]] = None,
        metrics: Optional[Mapping[str, str]] = None,
    ) -> "DataTable":
        return DataTable(
            rows,
            self._groupings if groupings is None else groupings,
            self._metrics if metrics is None else metrics,
        )

    def filter(self, predicate: Callable[[Row], bool]) -> "DataTable":
        return self._derive(row for row in self._rows if predicate(row))

    def where(self, **equals: Scalar) -> "DataTable":
        """
        Rows whose columns equal the given values, e.g. where(renewable=True).

        Matching is type-aware: True does not match 1, None does not match 0.
        """
        positions: Optional[set] = None
        for name, value in equals.items():
            hit = set(self._value_index(name).get(utils.cell_key(value), ()))
            positions = hit if positions is None else positions & hit
        if positions is None:
            return self._derive(self._rows)
        return self._derive(self._rows[p] for p in sorted(positions))

    def select(self, columns: Columns) -> "DataTable":
        """
        Project rows to 'interval' plus the requested columns.

        Groupings keep their previous order; metrics not requested are dropped.
        """
        cols = [c for c in _as_list(columns) if c != canon.INTERVAL_COL]
        wanted = set(cols)

        new_rows = []
        for row in self._rows:
            out: Dict[str, Scalar] = {canon.INTERVAL_COL: row[canon.INTERVAL_COL]}
            for c in cols:
                if c in row:
                    out[c] = row[c]
            new_rows.append(out)

        return self._derive(
            new_rows,
            groupings=[g for g in self._groupings if g in wanted],
            metrics={m: u for m, u in self._metrics.items() if m in wanted},
        )

    def sort_by(self, columns: Columns, ascending: bool = True) -> "DataTable":
        """
        Sort by columns in order; the first unequal column decides.

        None/NaN sort first when ascending and last when descending.
        """
        cols = _as_list(columns)
        sign = 1 if ascending else -1

        def compare(a: Row, b: Row) -> int:
            for col in cols:
                c = _compare_values(a.get(col), b.get(col))
                if c:
                    return sign * c
            return 0

        return self._derive(sorted(self._rows, key=cmp_to_key(compare)))

    def group_by(
        self, columns: Columns, aggregation: Aggregation = "sum"
    ) -> "DataTable":
        """
        Collapse rows sharing the values of columns into one row each.

        Each output row carries the key values, the 'interval' of the first
        row seen in its group and, per metric, the sum or mean of the
        group's valid numbers (None if the group has none). The result's
        groupings are exactly columns.
        """
        exceptions.require(
            aggregation in canon.AGGREGATIONS,
            f"aggregation must be one of: {', '.join(canon.AGGREGATIONS)}",
            exceptions.TableError,
        )
        cols = _as_list(columns)

        groups: Dict[tuple, List[Row]] = {}
        for row in self._rows:
            groups.setdefault(utils.group_key(row, cols), []).append(row)
        logger.debug(
            "group_by %s (%s): %d rows → %d groups",
            cols,
            aggregation,
            len(self._rows),
            len(groups),
        )

        new_rows = []
        for members in groups.values():
            first = members[0]
            out: Dict[str, Scalar] = {canon.INTERVAL_COL: first[canon.INTERVAL_COL]}
            for c in cols:
                out[c] = first.get(c)
            for metric in self._metrics:
                if metric in cols:
                    continue
                out[metric] = stats.aggregate(
                    (r.get(metric) for r in members), aggregation
                )
            new_rows.append(out)

        return self._derive(new_rows, groupings=cols)

    def describe(self) -> Dict[str, DescribeResult]:
        """
        count/mean/std/min/q25/median/q75/max per numeric column.

        A column is numeric when its value on the first row is a number.
        Columns without any valid values are left out.
        """
        if not self._rows:
            return {}
        out: Dict[str, DescribeResult] = {}
        for name, value in self._rows[0].items():
            if not stats.is_number(value):
                continue
            result = stats.describe_values(row.get(name) for row in self._rows)
            if result is not None:
                out[name] = result
        return out

    # ------------------ export ------------------

    def to_records(self) -> List[Dict[str, Scalar]]:
        """Plain dict rows with ISO-formatted intervals (console friendly)."""
        records = []
        for row in self._rows:
            rec = dict(row)
            rec[canon.INTERVAL_COL] = utils.interval_of(row).isoformat()
            records.append(rec)
        return records

    def to_dataframe(self) -> pd.DataFrame:
        """pandas DataFrame of the rows, one column per table column."""
        return pd.DataFrame.from_records(
            [dict(r) for r in self._rows], columns=self.columns
        )
