from __future__ import annotations
from typing import Dict, List, Literal, Mapping, Optional, Tuple, TypedDict, Union
from datetime import datetime

import pandas as pd
from pydantic import BaseModel, Field

NetworkCode = Literal["NEM", "WEM", "AU"]
DataInterval = Literal["5m", "1h", "1d", "7d", "1M", "3M", "season", "1y", "fy"]
Aggregation = Literal["sum", "mean"]

# Scalar cell values a row may carry; intervals are tz-aware Timestamps
Scalar = Union[pd.Timestamp, datetime, str, int, float, bool, None]
Row = Mapping[str, Scalar]

# Anything reconstruct() accepts as an offset: "+10:00", 10, "NEM"
OffsetSpec = Union[str, int, float]


class TimeSeriesResult(BaseModel):
    """One result block: the data for a fixed combination of grouping values.

    Attributes:
        name: Block label from the API (e.g. 'NSW1_renewable')
        date_start: First timestamp covered (network time, as sent)
        date_end: Last timestamp covered
        columns: Grouping column → value (e.g. {'network_region': 'NSW1'})
        data: (timestamp string, value or None) pairs
    """

    name: str = ""
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    columns: Dict[str, Union[bool, int, float, str, None]] = Field(default_factory=dict)
    data: List[Tuple[str, Optional[float]]] = Field(default_factory=list)


class NetworkTimeSeries(BaseModel):
    """One metric's time-series payload.

    Attributes:
        network_code: Network the data belongs to ('NEM', 'WEM', 'AU')
        metric: Metric name, becomes a column of the table (e.g. 'energy')
        unit: Unit of the metric (e.g. 'MWh')
        interval: Bucket size of the series (e.g. '5m', '1d')
        groupings: Grouping columns declared by the API
        results: Per-group result blocks
        network_timezone_offset: Fixed network offset, e.g. '+10:00'
    """

    network_code: str = "NEM"
    metric: str
    unit: str = ""
    interval: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    groupings: List[str] = Field(default_factory=list)
    results: List[TimeSeriesResult] = Field(default_factory=list)
    network_timezone_offset: Optional[str] = None


class DescribeResult(TypedDict):
    count: int
    mean: float
    std: float
    min: float
    q25: float
    median: float
    q75: float
    max: float
