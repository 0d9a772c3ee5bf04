from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
from pydantic import ValidationError

from . import canon, exceptions, network_time, utils
from .config import TableConfig, default_config
from .datatable import DataTable
from .types import NetworkTimeSeries, Scalar

logger = logging.getLogger(__name__)

SeriesLike = Union[NetworkTimeSeries, Mapping[str, Any]]


def _coerce_series(
    series: SeriesLike | Sequence[SeriesLike],
) -> List[NetworkTimeSeries]:
    """Accept one series or many, as models or API dicts."""
    if isinstance(series, (NetworkTimeSeries, Mapping)):
        items: Sequence[SeriesLike] = [series]
    else:
        items = list(series)

    out: List[NetworkTimeSeries] = []
    for i, item in enumerate(items):
        if isinstance(item, NetworkTimeSeries):
            out.append(item)
            continue
        try:
            out.append(NetworkTimeSeries.model_validate(item))
        except ValidationError as exc:
            raise exceptions.IngestError(f"Invalid time series at position {i}.") from exc
    return out


def _groupings_of(s: NetworkTimeSeries) -> List[str]:
    if s.groupings:
        return list(s.groupings)
    if s.results:
        return list(s.results[0].columns)
    return []


def _offset_of(s: NetworkTimeSeries, cfg: TableConfig) -> str:
    if s.network_timezone_offset:
        return network_time.normalise_offset(s.network_timezone_offset)
    network = s.network_code or cfg.default_network
    try:
        return network_time.network_utc_offset(network)
    except exceptions.NetworkError:
        return network_time.network_utc_offset(cfg.default_network)


def metric_units(series: Sequence[NetworkTimeSeries]) -> Dict[str, str]:
    """Ordered union of metric → unit; the first unit seen for a metric wins."""
    metrics: Dict[str, str] = {}
    for s in series:
        metrics.setdefault(s.metric, s.unit)
    return metrics


def from_timeseries(
    series: SeriesLike | Sequence[SeriesLike],
    *,
    config: Optional[TableConfig] = None,
) -> DataTable:
    """
    Materialise one or more network time series into a single DataTable.

    - Groupings come from the first series (declared, else its first
      result's columns). All series are expected to share that schema.
    - Points from different series with the same instant and grouping
      values are merged into one row, one column per metric.
    - Every row carries every metric; unseen values stay None.
    - Rows are sorted by 'interval' (stable, so ties keep insertion order).
    """
    cfg = config or default_config()
    items = _coerce_series(series)
    if not items:
        return DataTable([], [], {})

    groupings = _groupings_of(items[0])
    for s in items[1:]:
        other = _groupings_of(s)
        if set(other) != set(groupings):
            logger.warning(
                "Series %r groupings %s differ from %s; rows may not merge.",
                s.metric,
                other,
                groupings,
            )

    metrics = metric_units(items)
    empty_metrics = dict.fromkeys(metrics)

    rows: Dict[tuple, Dict[str, Scalar]] = {}
    parsed: Dict[Tuple[str, str], pd.Timestamp] = {}

    for s in items:
        offset = _offset_of(s, cfg)
        for result in s.results:
            cols_key = utils.columns_key(result.columns)
            for timestamp, value in result.data:
                ts = parsed.get((timestamp, offset))
                if ts is None:
                    ts = network_time.reconstruct(timestamp, offset)
                    parsed[(timestamp, offset)] = ts

                key = (ts.value, cols_key)
                row = rows.get(key)
                if row is None:
                    row = {canon.INTERVAL_COL: ts, **result.columns, **empty_metrics}
                    rows[key] = row
                row[s.metric] = value

    ordered = sorted(rows.values(), key=utils.interval_of)
    logger.debug(
        "Materialised %d series into %d rows (groupings=%s, metrics=%s)",
        len(items),
        len(ordered),
        groupings,
        list(metrics),
    )
    return DataTable(ordered, groupings, metrics)
