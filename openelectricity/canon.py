from __future__ import annotations
from typing import Final, Dict, Tuple

INTERVAL_COL: Final[str] = "interval"
DEFAULT_NETWORK: Final[str] = "NEM"
DEFAULT_INTERVAL_MIN: Final[int] = 5
AGGREGATIONS: Final[Tuple[str, ...]] = ("sum", "mean")

# Quantile label → fraction used by DataTable.describe (nearest-rank)
QUANTILES: Dict[str, float] = {
    "q25": 0.25,
    "median": 0.5,
    "q75": 0.75,
}

# Network code → fixed UTC offset in hours
NETWORK_TIMEZONE_OFFSETS: Dict[str, float] = {
    "NEM": 10,  # AEST
    "WEM": 8,  # AWST
    "AU": 10,  # all networks, defaults to AEST
}

ENV_DEFAULT_NETWORK: Final[str] = "OPENELECTRICITY_DEFAULT_NETWORK"
